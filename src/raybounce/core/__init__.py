"""Core ray and optics module.

Components:
    ray: Ray data structure, vector utilities, reflection, refraction,
        Schlick reflectance and random sampling

Every function here is a Taichi function meant to be inlined into the
kernels of the external rendering driver.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    random_float,
    random_in_unit_sphere,
    ray_at,
    reflect,
    refract,
    schlick,
    unit_vector,
    vec3,
)

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "unit_vector",
    "dot",
    "cross",
    "near_zero",
    "reflect",
    "refract",
    "schlick",
    "random_float",
    "random_in_unit_sphere",
]
