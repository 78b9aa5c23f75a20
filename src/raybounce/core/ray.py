"""Ray data structure, vector utilities and optics primitives.

This module provides the Ray dataclass carried between the camera, the
external intersection hierarchy and the materials, together with the
free functions that express the optical laws used during scattering:

    - Mirror reflection:    R = V - 2(V . N)N
    - Snell refraction:     vector form, with total internal reflection detection
    - Fresnel reflectance:  Schlick's approximation
    - Uniform sampling inside the unit sphere (rejection sampling)

All functions are Taichi functions and are inlined into the calling kernel.
Random numbers come from ``ti.random``, which keeps an independent state per
executing thread; seed it through ``ti.init(random_seed=...)``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.core.ray import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def point() -> vec3:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0), time=0.0)
    ...     return ray_at(ray, 5.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin, a direction and a time stamp.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized. A zero direction is a caller error and is left as is.
        time: The instant the ray exists at. Time-dependent geometry uses it
            for motion blur; scattering copies it to the outgoing ray.
    """

    origin: vec3
    direction: vec3
    time: ti.f32


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3, time: ti.f32) -> Ray:
    """Create a ray from origin, direction and time."""
    return Ray(origin=origin, direction=direction, time=time)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def unit_vector(v: vec3) -> vec3:
    """Scale a vector to unit length.

    Args:
        v: The input vector. Must be non-zero.

    Returns:
        A unit vector in the same direction as v.
    """
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return tm.cross(a, b)


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Args:
        v: The vector to check.

    Returns:
        1 if all components are below 1e-8 in magnitude, 0 otherwise.
    """
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Optics Primitives
# =============================================================================


@ti.func
def reflect(v: vec3, n: vec3) -> vec3:
    """Reflect a vector about a normal.

    The component of v along n is negated and the orthogonal component is
    preserved, so dot(reflect(v, n), n) == -dot(v, n).

    Args:
        v: The incoming direction (any length).
        n: The surface normal. Must be unit length.

    Returns:
        The mirror-reflected direction, with the same length as v.
    """
    return v - 2.0 * tm.dot(v, n) * n


@ti.func
def refract(v: vec3, n: vec3, ni_over_nt: ti.f32):
    """Refract a direction through a surface using Snell's law.

    With dt = dot(unit(v), n), the squared cosine of the transmitted angle is

        discriminant = 1 - ni_over_nt^2 * (1 - dt^2)

    A discriminant <= 0 means no transmitted ray exists (total internal
    reflection). This is a physical outcome the caller branches on.

    Args:
        v: The incoming direction (any non-zero length).
        n: The unit normal on the side the ray arrives from.
        ni_over_nt: Ratio of the incident to the transmitted refractive index.

    Returns:
        A tuple of (refracted, did_refract) where:
        - refracted: ni_over_nt * (unit(v) - n * dt) - n * sqrt(discriminant),
          or a zero vector on total internal reflection.
        - did_refract: 1 if a refracted direction exists, 0 otherwise.
    """
    unit_v = tm.normalize(v)
    dt = tm.dot(unit_v, n)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)

    refracted = vec3(0.0, 0.0, 0.0)
    did_refract = 0
    if discriminant > 0.0:
        refracted = ni_over_nt * (unit_v - n * dt) - n * ti.sqrt(discriminant)
        did_refract = 1
    return refracted, did_refract


@ti.func
def schlick(cosine: ti.f32, ref_idx: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between the incident direction and normal.
        ref_idx: Refractive index of the material relative to its surroundings.
            Must be positive.

    Returns:
        The reflectance r0 + (1 - r0) * (1 - cosine)^5, where
        r0 = ((1 - ref_idx) / (1 + ref_idx))^2.
    """
    r0 = (1.0 - ref_idx) / (1.0 + ref_idx)
    r0 = r0 * r0
    # Expanded power; cosine may exceed 1 for rays leaving the medium
    x = 1.0 - cosine
    return r0 + (1.0 - r0) * x * x * x * x * x


# =============================================================================
# Random Sampling
# =============================================================================


@ti.func
def random_float() -> ti.f32:
    """Draw a uniform random number in [0, 1) from the calling thread's stream."""
    return ti.random(ti.f32)


@ti.func
def random_in_unit_sphere() -> vec3:
    """Generate a random point uniformly distributed inside the unit sphere.

    Draws p = 2 * (r1, r2, r3) - (1, 1, 1) until |p|^2 < 1. The expected
    number of draws is 6 / pi (about 1.91).

    Returns:
        A random point with squared length strictly below 1.
    """
    p = vec3(1.0, 1.0, 1.0)
    while length_squared(p) >= 1.0:
        p = 2.0 * vec3(random_float(), random_float(), random_float()) - vec3(1.0, 1.0, 1.0)
    return p
