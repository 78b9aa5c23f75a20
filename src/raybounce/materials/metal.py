"""Metal (specular reflective) material implementation.

The metal reflects the normalized incident direction about the surface
normal and perturbs it by a random offset scaled by the fuzz parameter:

    R = unit(I) - 2(unit(I) . N)N + fuzz * random_in_unit_sphere()

If the perturbed direction points into the surface the path is absorbed.
This keeps low-fuzz metals from emitting self-intersecting rays and darkens
high-fuzz metals at grazing angles.

Fuzz is clamped to at most 1 when the material is registered, which bounds
the perturbation by the unit sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.materials.metal import scatter_metal
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_metal(
    >>> #     texture_id, fuzz, r_in, rec
    >>> # )
"""

import logging

import taichi as ti
import taichi.math as tm

from raybounce.core.ray import Ray, random_in_unit_sphere, reflect
from raybounce.materials.texture import is_valid_texture, sample_texture
from raybounce.scene.hit_record import HitRecord

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class MetalMaterial:
    """Metal (specular reflective) material properties.

    Attributes:
        texture_id: Handle of the texture that tints reflected light.
        fuzz: Perturbation radius in [0, 1]. 0 = perfect mirror.
    """

    texture_id: ti.i32
    fuzz: ti.f32


@ti.func
def scatter_metal(texture_id: ti.i32, fuzz: ti.f32, r_in: Ray, rec: HitRecord):
    """Scatter a ray off a metal surface.

    Args:
        texture_id: Handle of the albedo texture.
        fuzz: Perturbation radius, already clamped to at most 1.
        r_in: The incoming ray.
        rec: The intersection record of the struck surface.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: 1 if dot(scattered.direction, rec.normal) > 0, else 0
          (absorbed). A direction exactly tangent to the surface is absorbed.
        - attenuation: The texture colour at the hit point.
        - scattered: Ray from rec.point along the fuzzed reflection, carrying
          r_in.time. With fuzz = 0 this is the exact mirror direction.
    """
    reflected = reflect(tm.normalize(r_in.direction), rec.normal)
    reflected += fuzz * random_in_unit_sphere()
    scattered = Ray(origin=rec.point, direction=reflected, time=r_in.time)
    attenuation = sample_texture(texture_id, rec.u, rec.v, rec.point)

    did_scatter = 0
    if tm.dot(scattered.direction, rec.normal) > 0.0:
        did_scatter = 1

    return did_scatter, attenuation, scattered


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 256

metal_texture_ids = ti.field(dtype=ti.i32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clamp_fuzz(fuzz: float) -> float:
    """Clamp a fuzz value to at most 1.

    Raises:
        ValueError: If fuzz is negative.
    """
    if fuzz < 0.0:
        raise ValueError(f"Fuzz = {fuzz} is negative. Fuzz must be >= 0.")
    return fuzz if fuzz < 1.0 else 1.0


def clear_metal_materials() -> None:
    """Clear all metal materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_metal_materials[None] = 0


def add_metal_material(texture_id: int, fuzz: float = 0.0) -> int:
    """Add a metal material to the material registry.

    Args:
        texture_id: Handle of a registered texture supplying the albedo.
        fuzz: Perturbation radius. Default is 0 (perfect mirror). Values
            above 1 are clamped down to 1.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If texture_id is not registered or fuzz is negative.
    """
    if not is_valid_texture(texture_id):
        raise ValueError(f"Texture {texture_id} is not registered")
    fuzz = clamp_fuzz(fuzz)

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(
            f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded"
        )

    metal_texture_ids[idx] = texture_id
    metal_fuzzes[idx] = fuzz
    num_metal_materials[None] = idx + 1
    logger.debug("Registered metal material %d (texture %d, fuzz %.3f)", idx, texture_id, fuzz)
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_texture(material_idx: ti.i32) -> ti.i32:
    """Get the albedo texture handle for a metal material by index."""
    return metal_texture_ids[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> ti.f32:
    """Get the clamped fuzz for a metal material by index."""
    return metal_fuzzes[material_idx]


@ti.func
def scatter_metal_by_id(material_idx: ti.i32, r_in: Ray, rec: HitRecord):
    """Scatter off a registered metal material.

    Convenience function that looks up the texture handle and fuzz from the
    material registry and calls scatter_metal.

    Returns:
        A tuple of (did_scatter, attenuation, scattered).
    """
    texture_id = get_metal_texture(material_idx)
    fuzz = get_metal_fuzz(material_idx)
    return scatter_metal(texture_id, fuzz, r_in, rec)
