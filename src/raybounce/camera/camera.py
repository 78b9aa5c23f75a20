"""Fixed-origin perspective camera for primary ray generation.

The camera sits at the world origin and looks down -z with +y up. Its
viewport is a rectangle on the plane z = -1 whose height follows from the
vertical field of view and whose width follows from the aspect ratio:

    half_height = tan(vfov / 2)
    half_width  = aspect_ratio * half_height

A ray for normalized image coordinates (u, v) goes from the origin through
lower_left_corner + u * horizontal + v * vertical. The direction is not
normalized.

An optional shutter interval [time0, time1) gives jittered rays a random
time stamp for motion blur; get_ray() always uses time0.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.camera.camera import Camera, setup_camera, get_ray
    >>> setup_camera(Camera(vfov=90.0, aspect_ratio=2.0))
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5)  # Ray through the viewport centre
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from raybounce.core.ray import Ray, make_ray, random_float, vec3

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for the fixed-origin camera.

    Attributes:
        vfov: Vertical field of view in degrees, top to bottom.
        aspect_ratio: Width divided by height of the output image.
        time0: Shutter open time. Stamped on rays from get_ray().
        time1: Shutter close time. Jittered rays sample [time0, time1).
    """

    vfov: float
    aspect_ratio: float
    time0: float = 0.0
    time1: float = 0.0


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full width
_viewport_vertical = ti.Vector.field(3, dtype=ti.f32, shape=())  # Full height
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_shutter_open = ti.field(dtype=ti.f32, shape=())
_shutter_close = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Initialize camera state from configuration.

    Computes the viewport geometry and stores it in Taichi fields. This must
    be called before any kernel uses get_ray().

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If vfov is not in (0, 180), aspect_ratio is not positive,
            or time1 < time0.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Vertical field of view = {camera.vfov} must be in (0, 180) degrees")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"Aspect ratio = {camera.aspect_ratio} must be positive")
    if camera.time1 < camera.time0:
        raise ValueError(
            f"Shutter closes ({camera.time1}) before it opens ({camera.time0})"
        )

    theta = camera.vfov * math.pi / 180.0
    half_height = math.tan(theta / 2.0)
    half_width = camera.aspect_ratio * half_height

    origin = np.zeros(3, dtype=np.float32)
    horizontal = np.array([2.0 * half_width, 0.0, 0.0], dtype=np.float32)
    vertical = np.array([0.0, 2.0 * half_height, 0.0], dtype=np.float32)
    lower_left = np.array([-half_width, -half_height, -1.0], dtype=np.float32)

    _camera_origin[None] = origin.tolist()
    _viewport_horizontal[None] = horizontal.tolist()
    _viewport_vertical[None] = vertical.tolist()
    _lower_left_corner[None] = lower_left.tolist()
    _shutter_open[None] = camera.time0
    _shutter_close[None] = camera.time1

    logger.debug(
        "Camera viewport %.4f x %.4f at z=-1 (vfov %.1f, aspect %.4f)",
        2.0 * half_width,
        2.0 * half_height,
        camera.vfov,
        camera.aspect_ratio,
    )


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def _viewport_ray(u: ti.f32, v: ti.f32, time: ti.f32) -> Ray:
    origin = _camera_origin[None]
    target = (
        _lower_left_corner[None] + u * _viewport_horizontal[None] + v * _viewport_vertical[None]
    )
    return make_ray(origin, target - origin, time)


@ti.func
def get_ray(u: ti.f32, v: ti.f32) -> Ray:
    """Generate a ray through normalized image coordinates (u, v).

    - u = 0: left edge, u = 1: right edge
    - v = 0: bottom edge, v = 1: top edge

    The result depends only on (u, v) and the camera setup; no random
    numbers are drawn.

    Args:
        u: Horizontal coordinate, conventionally in [0, 1].
        v: Vertical coordinate, conventionally in [0, 1].

    Returns:
        A Ray from the camera origin toward the viewport point, stamped with
        the shutter open time.
    """
    return _viewport_ray(u, v, _shutter_open[None])


@ti.func
def get_ray_jittered(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate a jittered ray for anti-aliasing and motion blur.

    Adds a uniform random offset in [0, 1) to the pixel coordinates and
    samples the ray time uniformly in [time0, time1).

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray through a random point of the pixel at a random shutter time.
    """
    u = (ti.cast(pixel_i, ti.f32) + random_float()) / ti.cast(width, ti.f32)
    v = (ti.cast(pixel_j, ti.f32) + random_float()) / ti.cast(height, ti.f32)
    time0 = _shutter_open[None]
    time = time0 + random_float() * (_shutter_close[None] - time0)
    return _viewport_ray(u, v, time)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin in world space."""
    return _camera_origin[None]


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, horizontal, vertical, lower_left and the
        shutter interval.
    """

    def _as_tuple(field) -> tuple[float, float, float]:
        vec = field[None]
        return (float(vec[0]), float(vec[1]), float(vec[2]))

    return {
        "origin": _as_tuple(_camera_origin),
        "horizontal": _as_tuple(_viewport_horizontal),
        "vertical": _as_tuple(_viewport_vertical),
        "lower_left": _as_tuple(_lower_left_corner),
        "shutter": (float(_shutter_open[None]), float(_shutter_close[None])),
    }
