"""Per-bounce optical interaction model for a Monte Carlo ray tracer.

Given a ray that has struck a surface, the materials in this package decide
whether the ray is absorbed, diffusely scattered, specularly reflected or
refracted, and with what colour attenuation. All hot-path code runs as
Taichi functions inlined into the caller's kernels.

Subpackages:
    core: Ray type, vector utilities and optics primitives
    scene: Intersection record contract and the material library
    materials: Textures, Lambertian, Metal and Dielectric materials
    camera: Ray generation through a fixed-origin viewport
"""

__version__ = "0.1.0"
