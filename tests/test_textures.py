"""Tests for texture system."""

import pytest
import math
import numpy as np

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.textures import SolidColor, CheckerTexture, NoiseTexture, Perlin, as_texture
from pathforge.sampling import use_rng


class TestSolidColor:
    """Test SolidColor texture."""

    def test_returns_constant_color(self):
        tex = SolidColor(Color(0.5, 0.3, 0.1))
        color = tex.value(0, 0, Point3(0, 0, 0))
        assert color == Color(0.5, 0.3, 0.1)

    def test_ignores_uv(self):
        tex = SolidColor(Color(1, 0, 0))
        c1 = tex.value(0, 0, Point3(0, 0, 0))
        c2 = tex.value(0.5, 0.5, Point3(1, 1, 1))
        c3 = tex.value(1, 1, Point3(-5, 10, 3))
        assert c1 == c2 == c3

    def test_as_texture_wraps_color(self):
        tex = as_texture(Color(0.1, 0.2, 0.3))
        assert isinstance(tex, SolidColor)
        assert tex.value(0, 0, Point3(0, 0, 0)) == Color(0.1, 0.2, 0.3)

    def test_as_texture_passes_textures_through(self):
        tex = SolidColor(Color(1, 1, 1))
        assert as_texture(tex) is tex


class TestCheckerTexture:
    """Test CheckerTexture class."""

    def test_positive_product_is_even(self):
        tex = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))
        # sin(0.5) > 0 on every axis
        assert tex.value(0, 0, Point3(0.05, 0.05, 0.05)) == Color(1, 1, 1)

    def test_negative_product_is_odd(self):
        tex = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))
        assert tex.value(0, 0, Point3(-0.05, 0.05, 0.05)) == Color(0, 0, 0)

    def test_two_negative_factors_is_even(self):
        tex = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))
        assert tex.value(0, 0, Point3(-0.05, -0.05, 0.05)) == Color(1, 1, 1)

    def test_zero_product_is_even(self):
        tex = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))
        assert tex.value(0, 0, Point3(0, 0, 0)) == Color(1, 1, 1)

    def test_alternating_pattern(self):
        tex = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))

        # One cell is pi/10 wide along each axis
        c1 = tex.value(0, 0, Point3(0.15, 0.15, 0.15))
        c2 = tex.value(0, 0, Point3(0.15 + math.pi / 10, 0.15, 0.15))

        assert abs(c1.r - c2.r) > 0.5

    def test_ignores_uv(self):
        tex = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))
        p = Point3(0.3, -0.7, 1.1)
        assert tex.value(0, 0, p) == tex.value(0.9, 0.4, p)

    def test_nested_textures(self):
        inner = CheckerTexture(Color(1, 0, 0), Color(0, 1, 0))
        tex = CheckerTexture(inner, Color(0, 0, 1))
        p = Point3(0.05, 0.05, 0.05)
        assert tex.value(0, 0, p) == inner.value(0, 0, p)


class TestPerlin:
    """Test Perlin noise tables and sampling."""

    def test_gradients_are_unit_length(self):
        perlin = Perlin(np.random.default_rng(0))
        lengths = np.linalg.norm(perlin.ranvec, axis=1)
        assert perlin.ranvec.shape == (256, 3)
        assert np.allclose(lengths, 1.0)

    def test_permutations(self):
        perlin = Perlin(np.random.default_rng(0))
        for perm in (perlin.perm_x, perlin.perm_y, perlin.perm_z):
            assert sorted(perm) == list(range(256))

    def test_deterministic_for_same_generator_seed(self):
        a = Perlin(np.random.default_rng(11))
        b = Perlin(np.random.default_rng(11))
        p = Point3(1.3, -2.7, 0.45)
        assert a.noise(p) == b.noise(p)

    def test_uses_active_generator_by_default(self):
        with use_rng(np.random.default_rng(11)):
            a = Perlin()
        b = Perlin(np.random.default_rng(11))
        p = Point3(0.3, 0.6, 0.9)
        assert a.noise(p) == b.noise(p)

    def test_zero_at_lattice_points(self):
        perlin = Perlin(np.random.default_rng(3))
        for p in (Point3(0, 0, 0), Point3(3, 4, 5), Point3(-2, 7, -1)):
            assert abs(perlin.noise(p)) < 1e-12

    def test_noise_bounded(self):
        perlin = Perlin(np.random.default_rng(4))
        rng = np.random.default_rng(5)
        for _ in range(200):
            p = Point3(*rng.uniform(-20, 20, 3))
            assert abs(perlin.noise(p)) <= math.sqrt(3)

    def test_noise_is_continuous(self):
        perlin = Perlin(np.random.default_rng(6))
        p = Point3(2.5, 1.25, -0.75)
        assert abs(perlin.noise(p) - perlin.noise(p + Vec3(1e-7, 0, 0))) < 1e-5

    def test_negative_coordinates(self):
        perlin = Perlin(np.random.default_rng(7))
        assert math.isfinite(perlin.noise(Point3(-1.5, -2.3, -0.7)))

    def test_turbulence_non_negative(self):
        perlin = Perlin(np.random.default_rng(8))
        rng = np.random.default_rng(9)
        for _ in range(50):
            assert perlin.turbulence(Point3(*rng.uniform(-5, 5, 3))) >= 0


class TestNoiseTexture:
    """Test NoiseTexture class."""

    def test_noise_in_range(self):
        tex = NoiseTexture(scale=4.0, rng=np.random.default_rng(0))
        rng = np.random.default_rng(1)

        for _ in range(100):
            point = Point3(*rng.uniform(-10, 10, 3))
            color = tex.value(0, 0, point)
            # Marble output is in [0, 1] range
            assert 0 <= color.r <= 1
            assert 0 <= color.g <= 1
            assert 0 <= color.b <= 1

    def test_grey(self):
        tex = NoiseTexture(rng=np.random.default_rng(0))
        color = tex.value(0, 0, Point3(0.3, 1.7, -2.2))
        assert color.r == color.g == color.b

    def test_marble_formula(self):
        # Scale only stretches the z stripes; turbulence uses the raw point
        tex = NoiseTexture(scale=4.0, rng=np.random.default_rng(6))
        point = Point3(1.3, -0.4, 2.2)

        expected = 0.5 * (1 + math.sin(4.0 * 2.2 + 10 * tex.noise.turbulence(point)))
        assert abs(tex.value(0, 0, point).r - expected) < 1e-12

    def test_noise_varies(self):
        tex = NoiseTexture(scale=1.0, rng=np.random.default_rng(2))

        colors = [tex.value(0, 0, Point3(i * 0.1, 0, 0)) for i in range(10)]

        # Should have some variation
        values = [c.r for c in colors]
        assert max(values) - min(values) > 0.01

    def test_varies_with_z(self):
        tex = NoiseTexture(scale=1.0, rng=np.random.default_rng(3))

        colors = [tex.value(0, 0, Point3(0, 0, z * 0.5)) for z in range(10)]
        values = [c.r for c in colors]

        # Should have variation due to sine wave
        assert max(values) - min(values) > 0.1

    def test_stripes_at_lattice_origin(self):
        tex = NoiseTexture(scale=1.0, rng=np.random.default_rng(4))
        # Turbulence vanishes at the origin, leaving 0.5 * (1 + sin(0))
        assert tex.value(0, 0, Point3(0, 0, 0)) == Color(0.5, 0.5, 0.5)
