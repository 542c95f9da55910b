"""Tests for material system."""

import pytest
import math
import numpy as np

from pathforge.vec3 import Vec3, Point3, Color
from pathforge.ray import Ray
from pathforge.shapes import HitRecord
from pathforge.materials import Lambertian, Metal, Dielectric, DiffuseLight, reflectance
from pathforge.textures import CheckerTexture, SolidColor
from pathforge.sampling import use_rng


def make_hit(point, normal, front_face=True, u=0.0, v=0.0):
    return HitRecord(point=point, normal=normal, t=1.0, front_face=front_face, u=u, v=v)


class TestLambertian:
    """Test Lambertian diffuse material."""

    def test_scatter_always_succeeds(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = make_hit(Point3(0, 0, -1), Vec3(0, 0, 1))

        for _ in range(100):
            result = mat.scatter(ray_in, hit)
            assert result is not None

    def test_scattered_in_hemisphere(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        normal = Vec3(0, 1, 0)
        hit = make_hit(Point3(0, 0, 0), normal)

        for _ in range(100):
            result = mat.scatter(ray_in, hit)
            # Scattered ray should be in hemisphere of normal
            assert result.scattered_ray.direction.dot(normal) >= -1e-9

    def test_scatter_direction_is_normal_plus_unit_vector(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        normal = Vec3(0, 1, 0)
        hit = make_hit(Point3(0, 0, 0), normal)

        for _ in range(50):
            result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), hit)
            offset = result.scattered_ray.direction - normal
            if not result.scattered_ray.direction.near_zero():
                assert abs(offset.length() - 1.0) < 1e-9

    def test_scatter_starts_at_hit_point(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        hit = make_hit(Point3(1, 2, 3), Vec3(0, 1, 0))
        result = mat.scatter(Ray(Point3(1, 5, 3), Vec3(0, -1, 0), 0.3), hit)

        assert result.scattered_ray.origin == Point3(1, 2, 3)
        assert result.scattered_ray.time == 0.3

    def test_attenuation_matches_albedo(self):
        albedo = Color(0.8, 0.2, 0.3)
        mat = Lambertian(albedo)
        ray_in = Ray(Point3(0, 0, 0), Vec3(0, 0, -1))
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 1, 0))

        result = mat.scatter(ray_in, hit)
        assert result.attenuation == albedo

    def test_textured_albedo(self):
        checker = CheckerTexture(Color(1, 1, 1), Color(0, 0, 0))
        mat = Lambertian(checker)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0, -1, 0))

        even = mat.scatter(ray_in, make_hit(Point3(0.05, 0.05, 0.05), Vec3(0, 1, 0)))
        odd = mat.scatter(ray_in, make_hit(Point3(-0.05, 0.05, 0.05), Vec3(0, 1, 0)))

        assert even.attenuation == Color(1, 1, 1)
        assert odd.attenuation == Color(0, 0, 0)

    def test_degenerate_direction_falls_back_to_normal(self, monkeypatch):
        normal = Vec3(0, 1, 0)
        monkeypatch.setattr(Vec3, 'random_unit_vector', staticmethod(lambda: Vec3(0, -1, 0)))

        mat = Lambertian(Color(0.5, 0.5, 0.5))
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), make_hit(Point3(0, 0, 0), normal))

        assert result.scattered_ray.direction == normal

    def test_no_emission(self):
        mat = Lambertian(Color(0.5, 0.5, 0.5))
        assert mat.emitted(0, 0, Point3(0, 0, 0)) == Color(0, 0, 0)


class TestMetal:
    """Test Metal material."""

    def test_perfect_reflection(self):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        ray_in = Ray(Point3(0, 1, 0), Vec3(1, -1, 0))
        hit = make_hit(Point3(1, 0, 0), Vec3(0, 1, 0))

        result = mat.scatter(ray_in, hit)
        assert result is not None
        assert result.scattered_ray.direction == Vec3(1, 1, 0).normalize()

    def test_attenuation_matches_albedo(self):
        albedo = Color(0.9, 0.6, 0.2)
        mat = Metal(albedo)
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 1, 0))

        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)), hit)
        assert result.attenuation == albedo

    def test_fuzz_clamped(self):
        mat = Metal(Color(1, 1, 1), fuzz=5.0)
        assert mat.fuzz == 1.0

    def test_fuzz_kept_below_one(self):
        assert Metal(Color(1, 1, 1), fuzz=0.3).fuzz == 0.3

    def test_reflection_below_surface_absorbed(self):
        mat = Metal(Color(1, 1, 1), fuzz=0.0)
        # Normal on the same side as the ray's travel reflects into the surface
        ray_in = Ray(Point3(0, -1, 0), Vec3(0, 1, 0))
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 1, 0))

        assert mat.scatter(ray_in, hit) is None

    def test_fuzzy_reflection_stays_above_surface(self):
        mat = Metal(Color(1, 1, 1), fuzz=1.0)
        normal = Vec3(0, 1, 0)
        ray_in = Ray(Point3(-1, 1, 0), Vec3(1, -1, 0))
        hit = make_hit(Point3(0, 0, 0), normal)

        with use_rng(np.random.default_rng(0)):
            for _ in range(100):
                result = mat.scatter(ray_in, hit)
                if result is not None:
                    assert result.scattered_ray.direction.dot(normal) > 0

    def test_preserves_time(self):
        mat = Metal(Color(1, 1, 1))
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0), 0.8),
                             make_hit(Point3(0, 0, 0), Vec3(0, 1, 0)))
        assert result.scattered_ray.time == 0.8


class TestDielectric:
    """Test Dielectric (glass) material."""

    def test_always_scatters(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 1, 0), Vec3(0.3, -1, 0))
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 1, 0))

        for _ in range(100):
            assert mat.scatter(ray_in, hit) is not None

    def test_attenuation_is_white(self):
        mat = Dielectric(1.5)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)),
                             make_hit(Point3(0, 0, 0), Vec3(0, 1, 0)))
        assert result.attenuation == Color(1, 1, 1)

    def test_normal_incidence_reflect_or_transmit(self):
        mat = Dielectric(1.5)
        ray_in = Ray(Point3(0, 0, 1), Vec3(0, 0, -1))
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 0, 1))

        reflected = 0
        trials = 4000
        with use_rng(np.random.default_rng(1)):
            for _ in range(trials):
                direction = mat.scatter(ray_in, hit).scattered_ray.direction
                if direction == Vec3(0, 0, 1):
                    reflected += 1
                else:
                    assert direction == Vec3(0, 0, -1)

        # Schlick at normal incidence: ((1 - 1.5) / (1 + 1.5))^2 = 0.04
        assert 0.025 < reflected / trials < 0.055

    def test_refraction_bends_toward_normal(self):
        mat = Dielectric(1.5)
        incoming = Vec3(math.sin(math.radians(30)), -math.cos(math.radians(30)), 0)
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 1, 0))

        with use_rng(np.random.default_rng(2)):
            directions = [mat.scatter(Ray(Point3(0, 1, 0), incoming), hit).scattered_ray.direction
                          for _ in range(50)]

        refracted = [d for d in directions if d.y < 0]
        assert refracted
        for d in refracted:
            assert abs(d.x - 0.5 / 1.5) < 1e-9

    def test_total_internal_reflection(self):
        mat = Dielectric(1.5)
        # Leaving the glass at 60 degrees from the normal: 1.5 * sin(60) > 1
        incoming = Vec3(math.sin(math.radians(60)), math.cos(math.radians(60)), 0)
        hit = make_hit(Point3(0, 0, 0), Vec3(0, -1, 0), front_face=False)

        for _ in range(50):
            direction = mat.scatter(Ray(Point3(0, -1, 0), incoming), hit).scattered_ray.direction
            assert direction == Vec3(math.sin(math.radians(60)), -math.cos(math.radians(60)), 0)

    def test_unnormalized_input_direction(self):
        mat = Dielectric(1.5)
        hit = make_hit(Point3(0, 0, 0), Vec3(0, 1, 0))
        with use_rng(np.random.default_rng(3)):
            result = mat.scatter(Ray(Point3(0, 5, 0), Vec3(0.5, -10, 0)), hit)
        assert abs(result.scattered_ray.direction.length() - 1.0) < 1e-9

    def test_preserves_time(self):
        mat = Dielectric(1.5)
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0), 0.25),
                             make_hit(Point3(0, 0, 0), Vec3(0, 1, 0)))
        assert result.scattered_ray.time == 0.25


class TestReflectance:
    """Test Schlick's approximation."""

    def test_normal_incidence(self):
        assert reflectance(1.0, 1.5) == pytest.approx(0.04)

    def test_normal_incidence_inverse_ratio(self):
        # r0 is the same for n and 1/n
        assert reflectance(1.0, 1.0 / 1.5) == pytest.approx(0.04)

    def test_grazing_incidence(self):
        assert reflectance(0.0, 1.5) == pytest.approx(1.0)

    def test_monotonic_in_angle(self):
        values = [reflectance(c, 1.5) for c in (1.0, 0.8, 0.5, 0.2, 0.0)]
        assert values == sorted(values)

    def test_matched_index(self):
        assert reflectance(0.7, 1.0) == pytest.approx(0.3 ** 5)


class TestDiffuseLight:
    """Test DiffuseLight material."""

    def test_never_scatters(self):
        mat = DiffuseLight(Color(4, 4, 4))
        result = mat.scatter(Ray(Point3(0, 1, 0), Vec3(0, -1, 0)),
                             make_hit(Point3(0, 0, 0), Vec3(0, 1, 0)))
        assert result is None

    def test_emission(self):
        mat = DiffuseLight(Color(5, 3, 1))
        assert mat.emitted(0.5, 0.5, Point3(0, 0, 0)) == Color(5, 3, 1)

    def test_textured_emission(self):
        mat = DiffuseLight(CheckerTexture(Color(2, 2, 2), Color(0, 0, 0)))
        assert mat.emitted(0, 0, Point3(0.05, 0.05, 0.05)) == Color(2, 2, 2)
        assert mat.emitted(0, 0, Point3(-0.05, 0.05, 0.05)) == Color(0, 0, 0)

    def test_accepts_texture(self):
        tex = SolidColor(Color(1, 2, 3))
        assert DiffuseLight(tex).emit is tex
