"""
Materials system.

Implements:
- Lambertian diffuse (textured albedo)
- Metal (specular reflection with fuzz)
- Dielectric (glass, water - with refraction)
- Diffuse light (emission only)

The isotropic phase material used by participating media lives in
`volumes`.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union, TYPE_CHECKING
import math

from .vec3 import Vec3, Color, Point3
from .ray import Ray
from .textures import Texture, as_texture
from . import sampling

if TYPE_CHECKING:
    from .shapes import HitRecord


@dataclass
class ScatterResult:
    """Result of a material scatter operation."""
    scattered_ray: Ray
    attenuation: Color


class Material(ABC):
    """Abstract base class for materials."""

    @abstractmethod
    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        """Compute the scattered ray and attenuation.

        Args:
            ray_in: The incoming ray
            hit: The intersection being shaded

        Returns:
            ScatterResult if ray scatters, None if absorbed
        """
        pass

    def emitted(self, u: float, v: float, point: Point3) -> Color:
        """Return emitted light color. Default is no emission."""
        return Color(0, 0, 0)


class Lambertian(Material):
    """Diffuse material with Lambertian (ideal matte) scattering."""

    def __init__(self, albedo: Union[Color, Texture]):
        """Create a Lambertian material.

        Args:
            albedo: The base color, or a texture sampled at the hit point
        """
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        scatter_direction = hit.normal + Vec3.random_unit_vector()

        # Catch degenerate scatter direction
        if scatter_direction.near_zero():
            scatter_direction = hit.normal

        return ScatterResult(
            scattered_ray=Ray(hit.point, scatter_direction, ray_in.time),
            attenuation=self.albedo.value(hit.u, hit.v, hit.point)
        )


class Metal(Material):
    """Metallic material with specular reflection."""

    def __init__(self, albedo: Color, fuzz: float = 0.0):
        """Create a metal material.

        Args:
            albedo: The reflection color
            fuzz: Radius of the reflection perturbation (0 = mirror, capped at 1)
        """
        self.albedo = albedo
        self.fuzz = min(fuzz, 1.0)

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        reflected = ray_in.direction.normalize().reflect(hit.normal)
        direction = reflected + Vec3.random_in_unit_sphere() * self.fuzz
        scattered = Ray(hit.point, direction, ray_in.time)

        # Fuzzed reflections below the surface are absorbed
        if scattered.direction.dot(hit.normal) <= 0:
            return None
        return ScatterResult(scattered_ray=scattered, attenuation=self.albedo)


class Dielectric(Material):
    """Dielectric (glass-like) material with refraction."""

    def __init__(self, ior: float = 1.5):
        """Create a dielectric material.

        Args:
            ior: Index of refraction (1.0 = air, 1.5 = glass, 2.4 = diamond)
        """
        self.ior = ior

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        # Entering the medium uses 1/ior, leaving it uses ior
        refraction_ratio = 1.0 / self.ior if hit.front_face else self.ior

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(hit.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        cannot_refract = refraction_ratio * sin_theta > 1.0

        if cannot_refract or reflectance(cos_theta, refraction_ratio) > sampling.random_double():
            direction = unit_direction.reflect(hit.normal)
        else:
            direction = unit_direction.refract(hit.normal, refraction_ratio)

        return ScatterResult(
            scattered_ray=Ray(hit.point, direction, ray_in.time),
            attenuation=Color(1.0, 1.0, 1.0)
        )


def reflectance(cosine: float, ref_idx: float) -> float:
    """Schlick's approximation for reflectance."""
    r0 = (1 - ref_idx) / (1 + ref_idx)
    r0 = r0 * r0
    return r0 + (1 - r0) * pow(1 - cosine, 5)


class DiffuseLight(Material):
    """Light-emitting material. Never scatters."""

    def __init__(self, emit: Union[Color, Texture]):
        """Create an emissive material.

        Args:
            emit: The emitted radiance, as a color or a texture
        """
        self.emit = as_texture(emit)

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        return None

    def emitted(self, u: float, v: float, point: Point3) -> Color:
        return self.emit.value(u, v, point)
