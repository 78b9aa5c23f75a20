"""Materials module.

Components:
    texture: Texture arena (solid colour, 3D checker) addressed by handle
    lambertian: Ideal diffuse scattering toward a random point in a
        tangent unit sphere
    metal: Specular reflection with fuzz, absorbing rays scattered into
        the surface
    dielectric: Glass-like materials choosing between reflection and
        refraction with Schlick reflectance
    material: MaterialType tag, unified material ids and scatter dispatch

Every scatter function returns (did_scatter, attenuation, scattered).
"""

from .dielectric import (
    DielectricMaterial,
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_material_count,
    get_dielectric_ref_idx,
    is_total_internal_reflection,
    reflect_probability,
    scatter_dielectric,
    scatter_dielectric_by_id,
)
from .lambertian import (
    LambertianMaterial,
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_material_count,
    get_lambertian_texture,
    scatter_lambertian,
    scatter_lambertian_by_id,
)
from .material import (
    MaterialType,
    clear_material_registry,
    get_material_count,
    get_material_type,
    get_material_type_index,
    register_material,
    scatter,
)
from .metal import (
    MetalMaterial,
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
    get_metal_fuzz,
    get_metal_material_count,
    get_metal_texture,
    scatter_metal,
    scatter_metal_by_id,
)
from .texture import (
    TextureType,
    add_checker_texture,
    add_solid_texture,
    clear_textures,
    get_texture_count,
    is_valid_texture,
    sample_texture,
)

__all__ = [
    # Textures
    "TextureType",
    "add_solid_texture",
    "add_checker_texture",
    "clear_textures",
    "get_texture_count",
    "is_valid_texture",
    "sample_texture",
    # Lambertian
    "LambertianMaterial",
    "scatter_lambertian",
    "scatter_lambertian_by_id",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_texture",
    # Metal
    "MetalMaterial",
    "scatter_metal",
    "scatter_metal_by_id",
    "add_metal_material",
    "clamp_fuzz",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_texture",
    "get_metal_fuzz",
    # Dielectric
    "DielectricMaterial",
    "scatter_dielectric",
    "scatter_dielectric_by_id",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_ref_idx",
    "reflect_probability",
    "is_total_internal_reflection",
    # Dispatch
    "MaterialType",
    "register_material",
    "clear_material_registry",
    "get_material_count",
    "get_material_type",
    "get_material_type_index",
    "scatter",
]
