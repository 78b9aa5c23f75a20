"""Material library coordinating textures and materials.

The MaterialLibrary is the scene-construction layer for this package. It
owns the texture arena and the per-type material registries, hands out
unified material ids, validates parameters before they reach the Taichi
fields, and converts the whole set to and from plain dictionaries.

Configuration format (JSON-compatible):

    {
        "textures": [
            {"type": "solid", "color": [0.8, 0.3, 0.3]},
            {"type": "checker", "odd": [0.2, 0.3, 0.1], "even": [0.9, 0.9, 0.9],
             "scale": 10.0}
        ],
        "materials": [
            {"type": "lambertian", "texture": 1},
            {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.3},
            {"type": "dielectric", "ref_idx": 1.5}
        ]
    }

Lambertian and metal entries reference a texture by index, or give an
"albedo", which registers a solid texture on the fly.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raybounce.scene.library import MaterialLibrary
    >>> library = MaterialLibrary()
    >>> red = library.add_lambertian(albedo=(0.8, 0.1, 0.1))
    >>> gold = library.add_metal(albedo=(0.8, 0.6, 0.2), fuzz=0.3)
    >>> glass = library.add_dielectric(ref_idx=1.5)
    >>> # The external intersection hierarchy stores these ids in HitRecords
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from raybounce.materials.dielectric import (
    MAX_DIELECTRIC_MATERIALS,
    add_dielectric_material,
    clear_dielectric_materials,
)
from raybounce.materials.lambertian import (
    MAX_LAMBERTIAN_MATERIALS,
    add_lambertian_material,
    clear_lambertian_materials,
)
from raybounce.materials.material import (
    MAX_MATERIALS,
    MaterialType,
    clear_material_registry,
    register_material,
)
from raybounce.materials.metal import (
    MAX_METAL_MATERIALS,
    add_metal_material,
    clamp_fuzz,
    clear_metal_materials,
)
from raybounce.materials.texture import (
    MAX_TEXTURES,
    TextureType,
    add_checker_texture,
    add_solid_texture,
    clear_textures,
)

logger = logging.getLogger(__name__)

Color = tuple[float, float, float]


@dataclass
class TextureInfo:
    """Information about a registered texture.

    Attributes:
        texture_id: The texture handle.
        texture_type: Solid or checker.
        params: The texture parameters as provided during creation.
    """

    texture_id: int
    texture_type: TextureType
    params: dict[str, Any]


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material id.
        material_type: The variant of the material.
        type_index: The index within the type-specific registry.
        params: The material parameters as stored (fuzz already clamped).
    """

    material_id: int
    material_type: MaterialType
    type_index: int
    params: dict[str, Any]


@dataclass
class LibraryConfig:
    """Configuration for library serialization.

    Attributes:
        textures: List of texture configurations.
        materials: List of material configurations.
    """

    textures: list[dict[str, Any]] = field(default_factory=list)
    materials: list[dict[str, Any]] = field(default_factory=list)


def _as_color(values: Any, name: str) -> Color:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


class MaterialLibrary:
    """Builder for textures and materials with a unified material id space.

    Creating a library, or calling clear(), resets the texture arena and
    every material registry. Only one library should be active at a time
    because the registries are process-wide Taichi fields.

    Attributes:
        textures: TextureInfo for all registered textures.
        materials: MaterialInfo for all registered materials, indexed by
            unified material id.
    """

    def __init__(self) -> None:
        """Initialize an empty library."""
        self.textures: list[TextureInfo] = []
        self.materials: list[MaterialInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all library data including Taichi fields."""
        clear_textures()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_material_registry()
        self.textures.clear()
        self.materials.clear()

    def clear(self) -> None:
        """Clear every texture and material."""
        self._clear_all()
        logger.debug("Material library cleared")

    # =========================================================================
    # Textures
    # =========================================================================

    def add_solid_texture(self, color: Color) -> int:
        """Add a constant-colour texture.

        Returns:
            The texture handle.
        """
        color = _as_color(color, "Color")
        texture_id = add_solid_texture(color)
        self.textures.append(
            TextureInfo(texture_id, TextureType.SOLID, {"color": list(color)})
        )
        return texture_id

    def add_checker_texture(self, odd: Color, even: Color, scale: float = 10.0) -> int:
        """Add a 3D checker texture.

        Returns:
            The texture handle.
        """
        odd = _as_color(odd, "Odd color")
        even = _as_color(even, "Even color")
        texture_id = add_checker_texture(odd, even, scale)
        self.textures.append(
            TextureInfo(
                texture_id,
                TextureType.CHECKER,
                {"odd": list(odd), "even": list(even), "scale": scale},
            )
        )
        return texture_id

    def _resolve_texture(self, texture: int | None, albedo: Color | None) -> int:
        if texture is not None and albedo is not None:
            raise ValueError("Give either a texture or an albedo, not both")
        if texture is None:
            return self.add_solid_texture(albedo if albedo is not None else (0.5, 0.5, 0.5))
        if not 0 <= texture < len(self.textures):
            raise ValueError(f"Texture {texture} is not registered")
        return texture

    # =========================================================================
    # Materials
    # =========================================================================

    def _check_capacity(self, material_type: MaterialType, creates_texture: bool) -> None:
        """Raise before anything is registered if a material would not fit."""
        per_type = self.get_max_materials_per_type()[material_type.name.lower()]
        used = sum(1 for mat in self.materials if mat.material_type == material_type)
        if used >= per_type:
            raise RuntimeError(
                f"Maximum number of {material_type.name.lower()} materials ({per_type}) exceeded"
            )
        if len(self.materials) >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")
        if creates_texture and len(self.textures) >= MAX_TEXTURES:
            raise RuntimeError(f"Maximum number of textures ({MAX_TEXTURES}) exceeded")

    def _register(
        self, material_type: MaterialType, type_index: int, params: dict[str, Any]
    ) -> int:
        material_id = register_material(material_type, type_index)
        self.materials.append(MaterialInfo(material_id, material_type, type_index, params))
        return material_id

    def add_lambertian(self, texture: int | None = None, albedo: Color | None = None) -> int:
        """Add a Lambertian material.

        Args:
            texture: Handle of a registered texture.
            albedo: Solid colour to use instead of a texture. If neither is
                given, a mid-grey solid texture is created.

        Returns:
            The unified material id.
        """
        self._check_capacity(MaterialType.LAMBERTIAN, texture is None)
        texture_id = self._resolve_texture(texture, albedo)
        type_index = add_lambertian_material(texture_id)
        return self._register(MaterialType.LAMBERTIAN, type_index, {"texture": texture_id})

    def add_metal(
        self,
        texture: int | None = None,
        albedo: Color | None = None,
        fuzz: float = 0.0,
    ) -> int:
        """Add a metal material.

        Args:
            texture: Handle of a registered texture.
            albedo: Solid colour to use instead of a texture.
            fuzz: Perturbation radius; values above 1 are clamped to 1.

        Returns:
            The unified material id.
        """
        fuzz = clamp_fuzz(fuzz)
        self._check_capacity(MaterialType.METAL, texture is None)
        texture_id = self._resolve_texture(texture, albedo)
        type_index = add_metal_material(texture_id, fuzz)
        return self._register(
            MaterialType.METAL, type_index, {"texture": texture_id, "fuzz": fuzz}
        )

    def add_dielectric(self, ref_idx: float = 1.5) -> int:
        """Add a dielectric material.

        Returns:
            The unified material id.
        """
        self._check_capacity(MaterialType.DIELECTRIC, False)
        type_index = add_dielectric_material(ref_idx)
        return self._register(MaterialType.DIELECTRIC, type_index, {"ref_idx": ref_idx})

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material, or None for unknown ids."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def get_material_count(self) -> int:
        """Get the number of materials in the library."""
        return len(self.materials)

    def get_texture_count(self) -> int:
        """Get the number of textures in the library."""
        return len(self.textures)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_config(self) -> LibraryConfig:
        """Export the library to a configuration object."""
        config = LibraryConfig()
        for tex in self.textures:
            config.textures.append({"type": tex.texture_type.name.lower(), **tex.params})
        for mat in self.materials:
            config.materials.append({"type": mat.material_type.name.lower(), **mat.params})
        return config

    def from_config(self, config: LibraryConfig) -> None:
        """Load the library from a configuration object.

        Replaces the current contents. Textures are loaded before materials
        so material entries can refer to them by index. If any entry fails,
        the previous contents are restored before the error propagates.

        Raises:
            ValueError: If the configuration contains an unknown type or
                invalid parameters.
            RuntimeError: If the configuration exceeds a registry capacity.
        """
        previous = self.to_config()
        try:
            self._load(config)
        except (ValueError, RuntimeError):
            self._load(previous)
            logger.debug("Configuration rejected, previous library restored")
            raise

    def _load(self, config: LibraryConfig) -> None:
        self.clear()

        for tex_config in config.textures:
            tex_type = tex_config.get("type", "").lower()
            if tex_type == "solid":
                self.add_solid_texture(tex_config.get("color", [0.5, 0.5, 0.5]))
            elif tex_type == "checker":
                self.add_checker_texture(
                    tex_config.get("odd", [0.2, 0.3, 0.1]),
                    tex_config.get("even", [0.9, 0.9, 0.9]),
                    tex_config.get("scale", 10.0),
                )
            else:
                raise ValueError(f"Unknown texture type: {tex_type}")

        for mat_config in config.materials:
            mat_type = mat_config.get("type", "").lower()
            texture = mat_config.get("texture")
            albedo = mat_config.get("albedo")
            if albedo is not None:
                albedo = _as_color(albedo, "Albedo")
            if mat_type == "lambertian":
                self.add_lambertian(texture, albedo)
            elif mat_type == "metal":
                self.add_metal(texture, albedo, mat_config.get("fuzz", 0.0))
            elif mat_type == "dielectric":
                self.add_dielectric(mat_config.get("ref_idx", 1.5))
            else:
                raise ValueError(f"Unknown material type: {mat_type}")

        logger.debug(
            "Loaded %d textures and %d materials", len(self.textures), len(self.materials)
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the library to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {"textures": config.textures, "materials": config.materials}

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load the library from a dictionary with 'textures' and 'materials' keys."""
        config = LibraryConfig(
            textures=data.get("textures", []),
            materials=data.get("materials", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_textures() -> int:
        """Get the maximum number of textures supported."""
        return MAX_TEXTURES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported across all types."""
        return MAX_MATERIALS

    @staticmethod
    def get_max_materials_per_type() -> dict[str, int]:
        """Get the per-type registry capacities."""
        return {
            "lambertian": MAX_LAMBERTIAN_MATERIALS,
            "metal": MAX_METAL_MATERIALS,
            "dielectric": MAX_DIELECTRIC_MATERIALS,
        }
