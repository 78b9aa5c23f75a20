"""Pytest configuration for raybounce tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_registries():
    """Clear textures and material registries before and after each test."""
    # Import here so Taichi is initialized first
    from raybounce.materials.dielectric import clear_dielectric_materials
    from raybounce.materials.lambertian import clear_lambertian_materials
    from raybounce.materials.material import clear_material_registry
    from raybounce.materials.metal import clear_metal_materials
    from raybounce.materials.texture import clear_textures

    def _clear_all():
        clear_textures()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_material_registry()

    _clear_all()

    yield

    _clear_all()
