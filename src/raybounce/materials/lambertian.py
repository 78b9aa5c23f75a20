"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters every incoming ray. The outgoing direction
points from the hit point to a random target inside the unit sphere that is
tangent to the surface at the hit point:

    target = P + N + random_in_unit_sphere()

The resulting directions approximate a cosine-weighted hemisphere around the
normal, so the attenuation is simply the albedo sampled from the material's
texture.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.materials.lambertian import scatter_lambertian
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_lambertian(texture_id, r_in, rec)
"""

import logging

import taichi as ti
import taichi.math as tm

from raybounce.core.ray import Ray, random_in_unit_sphere
from raybounce.materials.texture import is_valid_texture, sample_texture
from raybounce.scene.hit_record import HitRecord

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class LambertianMaterial:
    """Lambertian (ideal diffuse) material properties.

    Attributes:
        texture_id: Handle of the texture that supplies the albedo.
    """

    texture_id: ti.i32


@ti.func
def scatter_lambertian(texture_id: ti.i32, r_in: Ray, rec: HitRecord):
    """Scatter a ray off a Lambertian surface.

    Args:
        texture_id: Handle of the albedo texture.
        r_in: The incoming ray. Only its time is used.
        rec: The intersection record of the struck surface.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: Always 1; diffuse surfaces never absorb the path.
        - attenuation: The texture colour at (rec.u, rec.v, rec.point).
        - scattered: Ray from rec.point toward the random target, carrying
          r_in.time. The direction is not normalized.
    """
    target = rec.point + rec.normal + random_in_unit_sphere()
    scattered = Ray(origin=rec.point, direction=target - rec.point, time=r_in.time)
    attenuation = sample_texture(texture_id, rec.u, rec.v, rec.point)
    did_scatter = 1
    return did_scatter, attenuation, scattered


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 256

lambertian_texture_ids = ti.field(dtype=ti.i32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(texture_id: int) -> int:
    """Add a Lambertian material to the material registry.

    Args:
        texture_id: Handle of a registered texture supplying the albedo.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If texture_id does not refer to a registered texture.
    """
    if not is_valid_texture(texture_id):
        raise ValueError(f"Texture {texture_id} is not registered")

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_texture_ids[idx] = texture_id
    num_lambertian_materials[None] = idx + 1
    logger.debug("Registered Lambertian material %d (texture %d)", idx, texture_id)
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_texture(material_idx: ti.i32) -> ti.i32:
    """Get the albedo texture handle for a Lambertian material by index."""
    return lambertian_texture_ids[material_idx]


@ti.func
def scatter_lambertian_by_id(material_idx: ti.i32, r_in: Ray, rec: HitRecord):
    """Scatter off a registered Lambertian material.

    Looks up the texture handle from the registry and calls
    scatter_lambertian.

    Returns:
        A tuple of (did_scatter, attenuation, scattered).
    """
    return scatter_lambertian(get_lambertian_texture(material_idx), r_in, rec)
