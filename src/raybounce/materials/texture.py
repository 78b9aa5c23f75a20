"""Texture arena supplying albedo to Lambertian and Metal materials.

Textures are stored in Taichi fields and addressed by integer handles.
Materials keep only the handle, so every texture must stay registered for as
long as a material refers to it. Two texture kinds are supported:

    - Solid: a constant colour.
    - Checker: a 3D procedural checker pattern selected by the sign of
      sin(s*x) * sin(s*y) * sin(s*z) at the hit point.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.materials.texture import add_solid_texture, sample_texture
    >>> red = add_solid_texture((0.8, 0.1, 0.1))
    >>> # Inside a Taichi kernel:
    >>> # color = sample_texture(red, rec.u, rec.v, rec.point)
"""

import logging
from enum import IntEnum

import taichi as ti
import taichi.math as tm

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


class TextureType(IntEnum):
    """Texture kinds understood by sample_texture."""

    SOLID = 0
    CHECKER = 1


# =============================================================================
# Texture Field Storage
# =============================================================================

MAX_TEXTURES = 256

texture_types = ti.field(dtype=ti.i32, shape=MAX_TEXTURES)
# Solid colour, or the "odd" checker colour
texture_colors_a = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TEXTURES)
# Unused for solid textures, the "even" checker colour otherwise
texture_colors_b = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TEXTURES)
texture_scales = ti.field(dtype=ti.f32, shape=MAX_TEXTURES)
num_textures = ti.field(dtype=ti.i32, shape=())


def _validate_color(name: str, color: tuple[float, float, float]) -> None:
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


def _add_texture(
    texture_type: TextureType,
    color_a: tuple[float, float, float],
    color_b: tuple[float, float, float],
    scale: float,
) -> int:
    idx = num_textures[None]
    if idx >= MAX_TEXTURES:
        raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")

    texture_types[idx] = int(texture_type)
    texture_colors_a[idx] = list(color_a)
    texture_colors_b[idx] = list(color_b)
    texture_scales[idx] = scale
    num_textures[None] = idx + 1
    logger.debug("Registered %s texture %d", texture_type.name.lower(), idx)
    return idx


def clear_textures() -> None:
    """Clear all textures.

    Resets the texture count to zero. Materials still holding old handles
    must be cleared as well.
    """
    num_textures[None] = 0


def add_solid_texture(color: tuple[float, float, float]) -> int:
    """Add a constant-colour texture.

    Args:
        color: The colour as an (R, G, B) tuple, each component in [0, 1].

    Returns:
        The handle of the added texture.

    Raises:
        RuntimeError: If the maximum number of textures is exceeded.
        ValueError: If any colour component is outside [0, 1].
    """
    _validate_color("Color", color)
    return _add_texture(TextureType.SOLID, color, (0.0, 0.0, 0.0), 1.0)


def add_checker_texture(
    odd: tuple[float, float, float],
    even: tuple[float, float, float],
    scale: float = 10.0,
) -> int:
    """Add a 3D checker texture.

    Args:
        odd: Colour where sin(s*x) * sin(s*y) * sin(s*z) is negative.
        even: Colour everywhere else.
        scale: Spatial frequency s of the pattern. Must be positive.

    Returns:
        The handle of the added texture.

    Raises:
        RuntimeError: If the maximum number of textures is exceeded.
        ValueError: If a colour component is outside [0, 1] or scale <= 0.
    """
    _validate_color("Odd color", odd)
    _validate_color("Even color", even)
    if scale <= 0.0:
        raise ValueError(f"Checker scale = {scale} must be positive.")
    return _add_texture(TextureType.CHECKER, odd, even, scale)


def get_texture_count() -> int:
    """Get the number of textures in the arena."""
    return int(num_textures[None])


def is_valid_texture(texture_id: int) -> bool:
    """Check whether a handle refers to a registered texture."""
    return 0 <= texture_id < get_texture_count()


# =============================================================================
# Texture Sampling (Taichi-compatible)
# =============================================================================


@ti.func
def sample_texture(texture_id: ti.i32, u: ti.f32, v: ti.f32, point: vec3) -> vec3:
    """Sample a texture at surface coordinates (u, v) and a world point.

    Args:
        texture_id: The texture handle.
        u: Surface texture coordinate.
        v: Surface texture coordinate.
        point: The world-space hit point.

    Returns:
        The texture colour. Unregistered handles sample to black.
    """
    color = vec3(0.0, 0.0, 0.0)
    if 0 <= texture_id < num_textures[None]:
        kind = texture_types[texture_id]
        if kind == int(TextureType.SOLID):
            color = texture_colors_a[texture_id]
        elif kind == int(TextureType.CHECKER):
            s = texture_scales[texture_id]
            sines = ti.sin(s * point.x) * ti.sin(s * point.y) * ti.sin(s * point.z)
            if sines < 0.0:
                color = texture_colors_a[texture_id]
            else:
                color = texture_colors_b[texture_id]
    return color
