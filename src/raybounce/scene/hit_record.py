"""Intersection record shared between the intersection hierarchy and materials.

The external intersection hierarchy fills one HitRecord per query; the
materials read it during a single scatter call and never modify it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.scene.hit_record import make_hit_record
    >>> # Inside a Taichi kernel:
    >>> # rec = make_hit_record(t, point, normal, ray.time, 0.0, 0.0, material_id)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        t: The ray parameter at which the intersection occurred.
        point: The 3D point where the ray struck the surface.
        normal: The outward-facing unit surface normal. It is not flipped
            toward the incoming ray; materials that care about the side
            (Dielectric) decide that from the ray direction.
        time: The time stamp of the ray that produced this record.
        u: Surface texture coordinate (0 if the surface supplies none).
        v: Surface texture coordinate (0 if the surface supplies none).
        material_id: Unified material id of the struck surface.
    """

    t: ti.f32
    point: vec3
    normal: vec3
    time: ti.f32
    u: ti.f32
    v: ti.f32
    material_id: ti.i32


@ti.func
def make_hit_record(
    t: ti.f32,
    point: vec3,
    normal: vec3,
    time: ti.f32,
    u: ti.f32,
    v: ti.f32,
    material_id: ti.i32,
) -> HitRecord:
    """Create a hit record with every field set."""
    return HitRecord(t=t, point=point, normal=normal, time=time, u=u, v=v, material_id=material_id)
