"""Unit tests for the ray module.

Tests cover:
- Ray dataclass, ray_at and make_ray
- Vector utilities (dot, cross, unit_vector, length)
- Reflection, refraction and Schlick reflectance
- Random sampling for Monte Carlo
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from raybounce.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0), time=0.0)
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 2.0) < 1e-6
        assert abs(r[2] - 3.0) < 1e-6

    def test_ray_at_unnormalized_direction(self):
        """Test ray_at scales an unnormalized direction by t."""
        from raybounce.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(2.0, 0.0, 0.0), time=0.0)
            result[None] = ray_at(ray, 1.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 3.0) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_make_ray_keeps_time(self):
        """Test make_ray stores origin, direction and time unchanged."""
        from raybounce.core.ray import make_ray, vec3

        result_dir = ti.field(dtype=ti.math.vec3, shape=())
        result_time = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 3.0, 4.0), 0.75)
            result_dir[None] = ray.direction
            result_time[None] = ray.time

        test_kernel()
        d = result_dir[None]
        assert abs(d[1] - 3.0) < 1e-6
        assert abs(d[2] - 4.0) < 1e-6
        assert abs(result_time[None] - 0.75) < 1e-6


class TestVectorUtilities:
    """Tests for vector helper functions."""

    def test_length_and_length_squared(self):
        from raybounce.core.ray import length, length_squared, vec3

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            v = vec3(3.0, 4.0, 0.0)
            result[0] = length(v)
            result[1] = length_squared(v)

        test_kernel()
        assert abs(result[0] - 5.0) < 1e-5
        assert abs(result[1] - 25.0) < 1e-5

    def test_unit_vector(self):
        from raybounce.core.ray import unit_vector, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = unit_vector(vec3(0.0, 0.0, -7.0))

        test_kernel()
        r = result[None]
        assert abs(r[2] + 1.0) < 1e-6

    def test_dot_and_cross(self):
        from raybounce.core.ray import cross, dot, vec3

        result_dot = ti.field(dtype=ti.f32, shape=())
        result_cross = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 0.0, 0.0)
            b = vec3(0.0, 1.0, 0.0)
            result_dot[None] = dot(a, b)
            result_cross[None] = cross(a, b)

        test_kernel()
        c = result_cross[None]
        assert abs(result_dot[None]) < 1e-6
        assert abs(c[0]) < 1e-6
        assert abs(c[1]) < 1e-6
        assert abs(c[2] - 1.0) < 1e-6

    def test_near_zero(self):
        from raybounce.core.ray import near_zero, vec3

        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = near_zero(vec3(1e-9, -1e-9, 0.0))
            result[1] = near_zero(vec3(1e-9, 1e-3, 0.0))

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0


class TestReflect:
    """Tests for mirror reflection."""

    def test_reflect_negates_normal_component(self):
        """dot(reflect(v, n), n) == -dot(v, n) and the tangent part is kept."""
        from raybounce.core.ray import reflect

        vectors = np.array(
            [[0.3, -1.2, 0.5], [2.0, 0.1, -0.4], [-0.7, 0.7, 3.0], [0.0, -1.0, 0.0]],
            dtype=np.float32,
        )
        normals = np.array(
            [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.6, 0.8], [0.0, 1.0, 0.0]],
            dtype=np.float32,
        )
        n_cases = len(vectors)
        v_field = ti.Vector.field(3, dtype=ti.f32, shape=n_cases)
        n_field = ti.Vector.field(3, dtype=ti.f32, shape=n_cases)
        out_field = ti.Vector.field(3, dtype=ti.f32, shape=n_cases)
        v_field.from_numpy(vectors)
        n_field.from_numpy(normals)

        @ti.kernel
        def test_kernel():
            for i in range(n_cases):
                out_field[i] = reflect(v_field[i], n_field[i])

        test_kernel()
        out = out_field.to_numpy()

        for v, n, r in zip(vectors, normals, out):
            assert abs(np.dot(r, n) + np.dot(v, n)) < 1e-5
            tangent_v = v - np.dot(v, n) * n
            tangent_r = r - np.dot(r, n) * n
            np.testing.assert_allclose(tangent_r, tangent_v, atol=1e-5)

    def test_reflect_head_on(self):
        from raybounce.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(0.0, 0.0, -1.0), vec3(0.0, 0.0, 1.0))

        test_kernel()
        r = result[None]
        assert r[0] == 0.0
        assert r[1] == 0.0
        assert r[2] == 1.0


class TestRefract:
    """Tests for Snell refraction."""

    def test_total_internal_reflection_detected(self):
        """Discriminant <= 0 reports no refraction."""
        from raybounce.core.ray import refract, vec3

        result_ok = ti.field(dtype=ti.i32, shape=())
        result_dir = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            # dt = -0.447, ni_over_nt^2 * (1 - dt^2) = 2.25 * 0.8 > 1
            v = vec3(1.0, -0.5, 0.0)
            n = vec3(0.0, 1.0, 0.0)
            refracted, ok = refract(v, n, 1.5)
            result_ok[None] = ok
            result_dir[None] = refracted

        test_kernel()
        assert result_ok[None] == 0
        d = result_dir[None]
        assert d[0] == 0.0 and d[1] == 0.0 and d[2] == 0.0

    def test_refraction_below_critical_angle(self):
        from raybounce.core.ray import refract, vec3

        result_ok = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(0.3, -1.0, 0.0)
            n = vec3(0.0, 1.0, 0.0)
            _, ok = refract(v, n, 1.5)
            result_ok[None] = ok

        test_kernel()
        assert result_ok[None] == 1

    def test_grazing_exactly_critical_is_no_refraction(self):
        """A discriminant of exactly zero counts as total internal reflection."""
        from raybounce.core.ray import refract, vec3

        result_ok = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            # Tangent ray: dt = 0, discriminant = 1 - 1 * 1 = 0
            _, ok = refract(vec3(1.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), 1.0)
            result_ok[None] = ok

        test_kernel()
        assert result_ok[None] == 0

    def test_index_ratio_one_is_identity(self):
        """With ni_over_nt = 1 a unit direction passes through unchanged."""
        from raybounce.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            v = ti.math.normalize(vec3(0.4, -1.0, 0.2))
            refracted, _ = refract(v, vec3(0.0, 1.0, 0.0), 1.0)
            result[None] = refracted

        test_kernel()
        expected = np.array([0.4, -1.0, 0.2]) / math.sqrt(0.16 + 1.0 + 0.04)
        np.testing.assert_allclose(result[None].to_numpy(), expected, atol=1e-5)

    def test_snells_law(self):
        """n1 sin(theta1) == n2 sin(theta2) for a 45 degree entry into glass."""
        from raybounce.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            v = vec3(1.0, -1.0, 0.0)
            refracted, _ = refract(v, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)
            result[None] = refracted

        test_kernel()
        r = result[None].to_numpy()
        # The refracted direction is unit length for a unit incident direction
        assert abs(np.linalg.norm(r) - 1.0) < 1e-5
        sin_t = abs(r[0]) / np.linalg.norm(r)
        assert abs(sin_t - math.sin(math.pi / 4) / 1.5) < 1e-5
        assert r[1] < 0.0


class TestSchlick:
    """Tests for the Schlick reflectance approximation."""

    def test_normal_incidence_equals_r0(self):
        from raybounce.core.ray import schlick

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick(1.0, 1.5)

        test_kernel()
        assert abs(result[None] - 0.04) < 1e-6

    def test_grazing_is_total(self):
        from raybounce.core.ray import schlick

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick(0.0, 1.5)

        test_kernel()
        assert abs(result[None] - 1.0) < 1e-6

    def test_matching_index_has_no_base_reflectance(self):
        from raybounce.core.ray import schlick

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = schlick(1.0, 1.0)

        test_kernel()
        assert abs(result[None]) < 1e-7

    @pytest.mark.parametrize("cosine", [0.1, 0.5, 0.9])
    def test_matches_formula(self, cosine):
        from raybounce.core.ray import schlick

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(c: ti.f32):
            result[None] = schlick(c, 2.4)

        test_kernel(cosine)
        r0 = ((1.0 - 2.4) / (1.0 + 2.4)) ** 2
        expected = r0 + (1.0 - r0) * (1.0 - cosine) ** 5
        assert abs(result[None] - expected) < 1e-5


class TestRandomSampling:
    """Tests for random number helpers."""

    def test_random_float_range(self):
        from raybounce.core.ray import random_float

        num_samples = 10000
        samples = ti.field(dtype=ti.f32, shape=num_samples)

        @ti.kernel
        def test_kernel():
            for i in range(num_samples):
                samples[i] = random_float()

        test_kernel()
        values = samples.to_numpy()
        assert values.min() >= 0.0
        assert values.max() < 1.0
        assert abs(values.mean() - 0.5) < 0.02

    def test_random_in_unit_sphere_inside(self):
        """All samples lie strictly inside the unit sphere."""
        from raybounce.core.ray import random_in_unit_sphere

        num_samples = 10000
        points = ti.Vector.field(3, dtype=ti.f32, shape=num_samples)

        @ti.kernel
        def test_kernel():
            for i in range(num_samples):
                points[i] = random_in_unit_sphere()

        test_kernel()
        p = points.to_numpy()
        squared = np.sum(p * p, axis=1)
        assert np.all(squared < 1.0)

    def test_random_in_unit_sphere_is_uniform(self):
        """Radial moments match a uniform ball: E|p| = 3/4, E|p|^2 = 3/5."""
        from raybounce.core.ray import random_in_unit_sphere

        num_samples = 20000
        points = ti.Vector.field(3, dtype=ti.f32, shape=num_samples)

        @ti.kernel
        def test_kernel():
            for i in range(num_samples):
                points[i] = random_in_unit_sphere()

        test_kernel()
        p = points.to_numpy()
        magnitudes = np.linalg.norm(p, axis=1)
        assert abs(magnitudes.mean() - 0.75) < 0.02
        assert abs((magnitudes**2).mean() - 0.6) < 0.02
        # No preferred direction
        np.testing.assert_allclose(p.mean(axis=0), np.zeros(3), atol=0.03)
