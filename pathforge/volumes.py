"""
Volumetric effects for the ray tracer.

Implements:
- Constant density volumes (fog, smoke) bounded by any hittable
- The isotropic phase material they scatter with
"""

from __future__ import annotations
from typing import Optional, Union
import math

from .vec3 import Vec3, Color
from .ray import Ray
from .shapes import Hittable, HitRecord, AABB
from .materials import Material, ScatterResult
from .textures import Texture, as_texture
from . import sampling


class Isotropic(Material):
    """Material for volumes that scatters equally in all directions."""

    def __init__(self, albedo: Union[Color, Texture]):
        self.albedo = as_texture(albedo)

    def scatter(self, ray_in: Ray, hit: HitRecord) -> Optional[ScatterResult]:
        scattered = Ray(hit.point, Vec3.random_in_unit_sphere(), ray_in.time)
        return ScatterResult(
            scattered_ray=scattered,
            attenuation=self.albedo.value(hit.u, hit.v, hit.point)
        )


class ConstantMedium(Hittable):
    """A constant density participating medium.

    Can be used for fog, smoke, clouds, etc.
    The medium is defined by a boundary shape and a density. The boundary
    is assumed convex: a ray enters and leaves it at most once.
    """

    # Gap between the entry hit and the search for the exit hit
    exit_epsilon = 0.0001

    def __init__(
        self,
        boundary: Hittable,
        density: float,
        albedo: Union[Color, Texture]
    ):
        """Create a constant density medium.

        Args:
            boundary: The shape that defines the medium's boundary
            density: The density of the medium (higher = more opaque)
            albedo: The color (or texture) of the medium
        """
        if density <= 0:
            raise ValueError(f"Medium density must be positive, got {density}")

        self.boundary = boundary
        self.density = density
        self.neg_inv_density = -1.0 / density
        self.phase_function = Isotropic(albedo)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Sample a scattering event inside the medium.

        The entry and exit parameters are found over the whole line, then
        clamped to the query window. A free path is drawn from the
        exponential distribution; if it outruns the segment the ray
        passes through untouched.
        """
        hit1 = self.boundary.hit(ray, float('-inf'), float('inf'))
        if hit1 is None:
            return None

        hit2 = self.boundary.hit(ray, hit1.t + self.exit_epsilon, float('inf'))
        if hit2 is None:
            return None

        t_enter = max(hit1.t, t_min)
        t_exit = min(hit2.t, t_max)

        if t_enter >= t_exit:
            return None

        t_enter = max(t_enter, 0.0)

        ray_length = ray.direction.length()
        distance_inside_boundary = (t_exit - t_enter) * ray_length
        # 1 - U lies in (0, 1], keeping the logarithm finite
        hit_distance = self.neg_inv_density * math.log(1.0 - sampling.random_double())

        if hit_distance > distance_inside_boundary:
            return None

        t = t_enter + hit_distance / ray_length

        return HitRecord(
            point=ray.at(t),
            normal=Vec3(1, 0, 0),  # Arbitrary, not used for volumes
            t=t,
            front_face=True,
            material=self.phase_function,
            u=0.0,
            v=0.0
        )

    def bounding_box(self) -> Optional[AABB]:
        return self.boundary.bounding_box()

    def __repr__(self) -> str:
        return f"ConstantMedium({self.boundary!r}, density={self.density})"


def create_smoke(boundary: Hittable, density: float = 0.01, color: Color = None) -> ConstantMedium:
    """Fill ``boundary`` with smoke, black unless ``color`` is given."""
    return ConstantMedium(boundary, density, color if color is not None else Color(0, 0, 0))
