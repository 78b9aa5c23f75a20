"""Unified material ids and scatter dispatch.

Materials form a closed set {Lambertian, Metal, Dielectric}. Each variant
keeps its parameters in its own registry; a unified material id maps to a
(MaterialType, type_index) pair so that intersection records only need to
carry one integer. scatter() matches on the tag and calls the variant.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.materials.material import MaterialType, register_material, scatter
    >>> from raybounce.materials.dielectric import add_dielectric_material
    >>> glass = register_material(MaterialType.DIELECTRIC, add_dielectric_material(1.5))
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter(glass, r_in, rec)
"""

import logging
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from raybounce.core.ray import Ray
from raybounce.materials.dielectric import (
    get_dielectric_material_count,
    scatter_dielectric_by_id,
)
from raybounce.materials.lambertian import (
    get_lambertian_material_count,
    scatter_lambertian_by_id,
)
from raybounce.materials.metal import (
    get_metal_material_count,
    scatter_metal_by_id,
)
from raybounce.scene.hit_record import HitRecord

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialType(IntEnum):
    """Tag of the material variant behind a unified material id."""

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


# Maximum number of materials across all types
MAX_MATERIALS = 768  # 256 per type * 3 types

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the index into the type-specific registry
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())

_TYPE_COUNTS = {
    MaterialType.LAMBERTIAN: get_lambertian_material_count,
    MaterialType.METAL: get_metal_material_count,
    MaterialType.DIELECTRIC: get_dielectric_material_count,
}


def clear_material_registry() -> None:
    """Forget every unified material id.

    The per-type registries are left untouched.
    """
    num_materials[None] = 0


def register_material(material_type: MaterialType, type_index: int) -> int:
    """Assign a unified material id to an entry of a per-type registry.

    Args:
        material_type: The variant the entry belongs to.
        type_index: The index returned by the variant's add_*_material().

    Returns:
        The unified material id.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If type_index does not exist in the variant's registry.
    """
    material_type = MaterialType(material_type)
    if not 0 <= type_index < _TYPE_COUNTS[material_type]():
        raise ValueError(
            f"No {material_type.name.lower()} material with index {type_index}"
        )

    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_types[material_id] = int(material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    logger.debug(
        "Material id %d -> %s[%d]", material_id, material_type.name.lower(), type_index
    )
    return material_id


def get_material_count() -> int:
    """Get the number of unified material ids."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a unified material id.

    Returns:
        The MaterialType as an integer, or -1 for unknown ids.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the index into the type-specific registry, or -1 for unknown ids."""
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result


@ti.func
def scatter(material_id: ti.i32, r_in: Ray, rec: HitRecord):
    """Scatter a ray off the material with the given unified id.

    This is the single per-bounce entry point for the external path tracer.

    Args:
        material_id: The unified material id (usually rec.material_id).
        r_in: The incoming ray.
        rec: The intersection record of the struck surface.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: 1 if the path continues, 0 if it was absorbed.
          Unknown material ids absorb.
        - attenuation: Per-channel colour multiplier for the scattered ray.
        - scattered: The outgoing ray. Only meaningful if did_scatter is 1.
    """
    mat_type = get_material_type(material_id)
    type_index = get_material_type_index(material_id)

    did_scatter = 0
    attenuation = vec3(0.0, 0.0, 0.0)
    # Unknown ids return this ray with a zero direction
    scattered = Ray(origin=rec.point, direction=vec3(0.0, 0.0, 0.0), time=r_in.time)

    if mat_type == int(MaterialType.LAMBERTIAN):
        ok, color, ray = scatter_lambertian_by_id(type_index, r_in, rec)
        did_scatter = ok
        attenuation = color
        scattered.origin = ray.origin
        scattered.direction = ray.direction
        scattered.time = ray.time

    elif mat_type == int(MaterialType.METAL):
        ok, color, ray = scatter_metal_by_id(type_index, r_in, rec)
        did_scatter = ok
        attenuation = color
        scattered.origin = ray.origin
        scattered.direction = ray.direction
        scattered.time = ray.time

    elif mat_type == int(MaterialType.DIELECTRIC):
        ok, color, ray = scatter_dielectric_by_id(type_index, r_in, rec)
        did_scatter = ok
        attenuation = color
        scattered.origin = ray.origin
        scattered.direction = ray.direction
        scattered.time = ray.time

    return did_scatter, attenuation, scattered
