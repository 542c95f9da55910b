"""
Instance transforms for hittables.

Rather than moving geometry, the wrappers move the ray into the child's
local frame, intersect there, and carry the hit point and normal back to
world space.
"""

from __future__ import annotations
from typing import Optional
import math

import numpy as np

from .vec3 import Vec3, Point3
from .ray import Ray
from .shapes import Hittable, HitRecord, AABB


class Translate(Hittable):
    """Offsets a child hittable by a fixed vector."""

    def __init__(self, child: Hittable, offset: Vec3):
        self.child = child
        self.offset = offset

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        moved = Ray(ray.origin - self.offset, ray.direction, ray.time)
        hit_record = self.child.hit(moved, t_min, t_max)
        if hit_record is None:
            return None

        # Translation leaves the normal and its orientation unchanged
        hit_record.point = hit_record.point + self.offset
        return hit_record

    def bounding_box(self) -> Optional[AABB]:
        box = self.child.bounding_box()
        if box is None:
            return None
        return AABB(box.minimum + self.offset, box.maximum + self.offset)

    def __repr__(self) -> str:
        return f"Translate({self.child!r}, offset={self.offset})"


class RotateY(Hittable):
    """Rotates a child hittable about the world Y axis."""

    def __init__(self, child: Hittable, angle: float):
        """Create a rotation wrapper.

        Args:
            child: The object to rotate
            angle: Rotation angle in degrees (counter-clockwise seen from +Y)
        """
        self.child = child
        self.angle = angle

        radians = math.radians(angle)
        self.sin_theta = math.sin(radians)
        self.cos_theta = math.cos(radians)
        self._bbox = self._rotated_box(child.bounding_box())

    def _to_local(self, v: Vec3) -> Vec3:
        return Vec3(
            self.cos_theta * v.x - self.sin_theta * v.z,
            v.y,
            self.sin_theta * v.x + self.cos_theta * v.z
        )

    def _to_world(self, v: Vec3) -> Vec3:
        return Vec3(
            self.cos_theta * v.x + self.sin_theta * v.z,
            v.y,
            -self.sin_theta * v.x + self.cos_theta * v.z
        )

    def _rotated_box(self, box: Optional[AABB]) -> Optional[AABB]:
        """Box enclosing all eight rotated corners of ``box``."""
        if box is None:
            return None

        corners = np.array([
            [x, y, z]
            for x in (box.minimum.x, box.maximum.x)
            for y in (box.minimum.y, box.maximum.y)
            for z in (box.minimum.z, box.maximum.z)
        ])
        rotated = np.column_stack([
            self.cos_theta * corners[:, 0] + self.sin_theta * corners[:, 2],
            corners[:, 1],
            -self.sin_theta * corners[:, 0] + self.cos_theta * corners[:, 2],
        ])
        return AABB(
            Point3.from_array(rotated.min(axis=0)),
            Point3.from_array(rotated.max(axis=0))
        )

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        rotated = Ray(self._to_local(ray.origin), self._to_local(ray.direction), ray.time)

        hit_record = self.child.hit(rotated, t_min, t_max)
        if hit_record is None:
            return None

        # Rotation preserves which side of the surface was struck
        hit_record.point = self._to_world(hit_record.point)
        hit_record.normal = self._to_world(hit_record.normal)
        return hit_record

    def bounding_box(self) -> Optional[AABB]:
        return self._bbox

    def __repr__(self) -> str:
        return f"RotateY({self.child!r}, angle={self.angle})"
