"""Scene-facing contracts and configuration.

Components:
    hit_record: Intersection record produced by the external intersection
        hierarchy and consumed by the materials
    library: MaterialLibrary, the Python-side builder for textures and
        materials with dict-based configuration
"""

from .hit_record import HitRecord, make_hit_record

# Note: library is NOT imported here to avoid circular imports, since the
# materials themselves depend on hit_record. Import it directly:
#   from raybounce.scene.library import MaterialLibrary

__all__ = [
    "HitRecord",
    "make_hit_record",
]
