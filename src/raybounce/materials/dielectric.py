"""Dielectric (glass/water) material implementation.

Dielectrics never absorb the path and never tint it (attenuation is white).
Each scatter produces exactly one outgoing ray, chosen stochastically
between the mirror reflection and the Snell refraction:

    - Whether the ray enters or leaves the medium follows from the sign of
      dot(direction, normal); the hit record's normal always points outward.
    - If refraction is impossible (total internal reflection) the ray
      always reflects.
    - Otherwise it reflects with the Schlick reflectance for the incident
      angle and refracts with the remaining probability.

The external driver recovers the full reflect/refract split by averaging
many samples per pixel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.materials.dielectric import scatter_dielectric
    >>> # Use within a Taichi kernel:
    >>> # did_scatter, attenuation, scattered = scatter_dielectric(ref_idx, r_in, rec)
"""

import logging

import taichi as ti
import taichi.math as tm

from raybounce.core.ray import Ray, random_float, reflect, refract, schlick
from raybounce.scene.hit_record import HitRecord

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class DielectricMaterial:
    """Dielectric (glass/water) material properties.

    Attributes:
        ref_idx: Refractive index relative to the surrounding medium. Common
            values against air:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    ref_idx: ti.f32


@ti.func
def _interface(ref_idx: ti.f32, direction: vec3, normal: vec3):
    """Resolve which side of the interface a ray arrives from.

    Returns:
        A tuple of (outward_normal, ni_over_nt, cosine) where outward_normal
        faces the incoming ray, ni_over_nt is the index ratio across the
        boundary and cosine is the angle term fed to Schlick.
    """
    d_dot_n = tm.dot(direction, normal)
    outward_normal = normal
    ni_over_nt = 1.0 / ref_idx
    cosine = -d_dot_n / tm.length(direction)
    if d_dot_n > 0.0:
        # Leaving the medium
        outward_normal = -normal
        ni_over_nt = ref_idx
        cosine = ref_idx * d_dot_n / tm.length(direction)
    return outward_normal, ni_over_nt, cosine


@ti.func
def reflect_probability(ref_idx: ti.f32, direction: vec3, normal: vec3) -> ti.f32:
    """Probability that a ray striking the dielectric is reflected.

    Args:
        ref_idx: Refractive index of the material.
        direction: Incoming ray direction (any non-zero length).
        normal: Outward-facing unit normal at the hit point.

    Returns:
        1 on total internal reflection, otherwise schlick(cosine, ref_idx).
    """
    outward_normal, ni_over_nt, cosine = _interface(ref_idx, direction, normal)
    _, did_refract = refract(direction, outward_normal, ni_over_nt)
    probability = 1.0
    if did_refract == 1:
        probability = schlick(cosine, ref_idx)
    return probability


@ti.func
def is_total_internal_reflection(ref_idx: ti.f32, direction: vec3, normal: vec3) -> ti.i32:
    """Return 1 if no refracted direction exists for this ray, 0 otherwise."""
    outward_normal, ni_over_nt, _ = _interface(ref_idx, direction, normal)
    _, did_refract = refract(direction, outward_normal, ni_over_nt)
    return 1 - did_refract


@ti.func
def scatter_dielectric(ref_idx: ti.f32, r_in: Ray, rec: HitRecord):
    """Scatter a ray off a dielectric surface.

    Args:
        ref_idx: Refractive index of the material.
        r_in: The incoming ray.
        rec: The intersection record, with an outward-facing normal.

    Returns:
        A tuple of (did_scatter, attenuation, scattered) where:
        - did_scatter: Always 1.
        - attenuation: Always white (1, 1, 1).
        - scattered: Reflected or refracted ray from rec.point, carrying
          r_in.time. Exactly one uniform random number is drawn per call.
    """
    attenuation = vec3(1.0, 1.0, 1.0)
    reflected = reflect(r_in.direction, rec.normal)

    outward_normal, ni_over_nt, cosine = _interface(ref_idx, r_in.direction, rec.normal)
    refracted, did_refract = refract(r_in.direction, outward_normal, ni_over_nt)

    # Total internal reflection forces the mirror branch
    reflect_prob = 1.0
    if did_refract == 1:
        reflect_prob = schlick(cosine, ref_idx)

    direction = refracted
    if random_float() < reflect_prob:
        direction = reflected

    scattered = Ray(origin=rec.point, direction=direction, time=r_in.time)
    did_scatter = 1
    return did_scatter, attenuation, scattered


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 256

dielectric_ref_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(ref_idx: float = 1.5) -> int:
    """Add a dielectric material to the material registry.

    Args:
        ref_idx: Refractive index relative to the surrounding medium.
            Default is 1.5 (typical glass). Values below 1 model a less
            dense inclusion, such as an air bubble in water.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If ref_idx is not positive.
    """
    if ref_idx <= 0.0:
        raise ValueError(
            f"Refractive index = {ref_idx} is not positive. "
            "The index ratio must be > 0 for refraction to be defined."
        )

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_ref_indices[idx] = ref_idx
    num_dielectric_materials[None] = idx + 1
    logger.debug("Registered dielectric material %d (ref_idx %.3f)", idx, ref_idx)
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_ref_idx(material_idx: ti.i32) -> ti.f32:
    """Get the refractive index for a dielectric material by index."""
    return dielectric_ref_indices[material_idx]


@ti.func
def scatter_dielectric_by_id(material_idx: ti.i32, r_in: Ray, rec: HitRecord):
    """Scatter off a registered dielectric material.

    Returns:
        A tuple of (did_scatter, attenuation, scattered).
    """
    return scatter_dielectric(get_dielectric_ref_idx(material_idx), r_in, rec)
