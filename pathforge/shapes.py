"""
Geometric shapes for the ray tracer.

Each shape must implement the Hittable protocol with a `hit` method and
report an axis-aligned bounding box. Intersection is a linear scan over
the scene, so the boxes are only consulted by callers that want them.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING
import math

import numpy as np

from .vec3 import Vec3, Point3, divide
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Stores information about a ray-object intersection.

    Attributes:
        point: The intersection point in world space
        normal: The unit surface normal at the intersection (always points against ray)
        t: The ray parameter at intersection
        front_face: True if ray hit from outside the object
        material: The material at the hit point (shared, not owned)
        u, v: Texture coordinates at the hit point
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool
    material: Optional[Material] = None
    u: float = 0.0
    v: float = 0.0

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        """Set the normal to always point against the ray direction.

        Args:
            ray: The incoming ray
            outward_normal: The geometric normal pointing outward from surface
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Abstract base class for all objects that can be hit by rays."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test if ray intersects this object.

        Args:
            ray: The ray to test
            t_min: Minimum t value to consider (avoid self-intersection)
            t_max: Maximum t value to consider

        Returns:
            HitRecord if intersection found, None otherwise
        """
        pass

    @abstractmethod
    def bounding_box(self) -> Optional['AABB']:
        """Get the axis-aligned bounding box for this object.

        Returns:
            AABB if the object is bounded, None otherwise
        """
        pass


class AABB:
    """Axis-Aligned Bounding Box for acceleration structures."""

    def __init__(self, minimum: Point3, maximum: Point3):
        """Create an AABB from corner points.

        Args:
            minimum: Corner with smallest x, y, z values
            maximum: Corner with largest x, y, z values
        """
        self.minimum = minimum
        self.maximum = maximum

    def hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Test if ray intersects this AABB using the slab method.

        Zero direction components divide to signed infinities, so rays
        parallel to a slab need no special case. A NaN slab parameter
        (origin exactly on a slab plane) leaves the interval unchanged.
        """
        with np.errstate(divide='ignore', invalid='ignore'):
            inv_d = 1.0 / ray.direction._data
            t0s = (self.minimum._data - ray.origin._data) * inv_d
            t1s = (self.maximum._data - ray.origin._data) * inv_d

        for a in range(3):
            t0 = float(t0s[a])
            t1 = float(t1s[a])
            if inv_d[a] < 0:
                t0, t1 = t1, t0

            if t0 > t_min:
                t_min = t0
            if t1 < t_max:
                t_max = t1

            if t_max <= t_min:
                return False

        return True

    @staticmethod
    def surrounding_box(box0: 'AABB', box1: 'AABB') -> 'AABB':
        """Return the AABB that contains both input boxes."""
        small = Point3.from_array(np.minimum(box0.minimum._data, box1.minimum._data))
        big = Point3.from_array(np.maximum(box0.maximum._data, box1.maximum._data))
        return AABB(small, big)

    def __repr__(self) -> str:
        return f"AABB(min={self.minimum}, max={self.maximum})"


def get_sphere_uv(point: Vec3) -> tuple[float, float]:
    """Get spherical UV coordinates for a point on the unit sphere.

    u: returned value [0,1] of angle around the Y axis from X=-1
    v: returned value [0,1] of angle from Y=-1 to Y=+1
    """
    theta = math.acos(max(-1.0, min(1.0, -point.y)))
    phi = math.atan2(-point.z, point.x) + math.pi

    u = phi / (2 * math.pi)
    v = theta / math.pi
    return u, v


def _hit_sphere(
    ray: Ray,
    center: Point3,
    radius: float,
    material: Optional[Material],
    t_min: float,
    t_max: float
) -> Optional[HitRecord]:
    """Ray-sphere intersection shared by the static and moving spheres.

    The equation (P-C)·(P-C) = r² where P = ray.at(t)
    expands to: t²(d·d) + 2t(d·(O-C)) + (O-C)·(O-C) - r² = 0
    which is the quadratic at² + bt + c = 0.
    """
    oc = ray.origin - center
    a = ray.direction.length_squared()
    half_b = oc.dot(ray.direction)
    c = oc.length_squared() - radius * radius

    discriminant = half_b * half_b - a * c
    if discriminant < 0:
        return None

    sqrtd = math.sqrt(discriminant)

    # Find the nearest root in the acceptable range
    root = divide(-half_b - sqrtd, a)
    if not (t_min <= root <= t_max):
        root = divide(-half_b + sqrtd, a)
        if not (t_min <= root <= t_max):
            return None

    point = ray.at(root)
    outward_normal = (point - center) / radius
    u, v = get_sphere_uv(outward_normal)

    hit_record = HitRecord(
        point=point,
        normal=outward_normal,
        t=root,
        front_face=True,
        material=material,
        u=u,
        v=v
    )
    hit_record.set_face_normal(ray, outward_normal)

    return hit_record


class Sphere(Hittable):
    """A sphere defined by center and radius."""

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (negative radius flips normals inward)
            material: Material for shading
        """
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return _hit_sphere(ray, self.center, self.radius, self.material, t_min, t_max)

    def bounding_box(self) -> Optional[AABB]:
        """Return the AABB containing this sphere."""
        r_vec = Vec3(abs(self.radius), abs(self.radius), abs(self.radius))
        return AABB(self.center - r_vec, self.center + r_vec)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class MovingSphere(Hittable):
    """A sphere that moves linearly between two positions over time.

    Used for motion blur effects.
    """

    def __init__(
        self,
        center0: Point3,
        center1: Point3,
        time0: float,
        time1: float,
        radius: float,
        material: Optional[Material] = None
    ):
        """Create a moving sphere.

        Args:
            center0: Center position at time0
            center1: Center position at time1
            time0: Start time
            time1: End time
            radius: Radius of the sphere
            material: Material for shading
        """
        self.center0 = center0
        self.center1 = center1
        self.time0 = time0
        self.time1 = time1
        self.radius = radius
        self.material = material

    def center(self, time: float) -> Point3:
        """Get the center position at a given time."""
        if self.time1 == self.time0:
            return self.center0
        t = (time - self.time0) / (self.time1 - self.time0)
        return self.center0 + (self.center1 - self.center0) * t

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Test ray-sphere intersection at the ray's time."""
        return _hit_sphere(ray, self.center(ray.time), self.radius, self.material, t_min, t_max)

    def bounding_box(self) -> Optional[AABB]:
        """Return AABB that contains the sphere at all times."""
        r_vec = Vec3(abs(self.radius), abs(self.radius), abs(self.radius))
        box0 = AABB(self.center0 - r_vec, self.center0 + r_vec)
        box1 = AABB(self.center1 - r_vec, self.center1 + r_vec)
        return AABB.surrounding_box(box0, box1)

    def __repr__(self) -> str:
        return f"MovingSphere(center0={self.center0}, center1={self.center1}, radius={self.radius})"


class AxisAlignedRect(Hittable):
    """A rectangle lying in a plane of constant coordinate.

    Subclasses pick the axes: ``axes`` holds the two in-plane axis indices
    followed by the index of the constant axis.
    """

    axes: tuple[int, int, int] = (0, 1, 2)
    # Thickness given to the bounding box along the constant axis
    padding = 0.0001

    def __init__(
        self,
        a0: float,
        a1: float,
        b0: float,
        b1: float,
        k: float,
        material: Optional[Material] = None
    ):
        self.a0 = a0
        self.a1 = a1
        self.b0 = b0
        self.b1 = b1
        self.k = k
        self.material = material

        normal = [0.0, 0.0, 0.0]
        normal[self.axes[2]] = 1.0
        self.outward_normal = Vec3(*normal)

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        ia, ib, ik = self.axes

        t = divide(self.k - ray.origin[ik], ray.direction[ik])
        if not (t_min <= t <= t_max):
            return None

        a = ray.origin[ia] + t * ray.direction[ia]
        b = ray.origin[ib] + t * ray.direction[ib]
        if not (self.a0 <= a <= self.a1 and self.b0 <= b <= self.b1):
            return None

        hit_record = HitRecord(
            point=ray.at(t),
            normal=self.outward_normal,
            t=t,
            front_face=True,
            material=self.material,
            u=divide(a - self.a0, self.a1 - self.a0),
            v=divide(b - self.b0, self.b1 - self.b0)
        )
        hit_record.set_face_normal(ray, self.outward_normal)

        return hit_record

    def bounding_box(self) -> Optional[AABB]:
        ia, ib, ik = self.axes
        minimum = [0.0, 0.0, 0.0]
        maximum = [0.0, 0.0, 0.0]
        minimum[ia], maximum[ia] = self.a0, self.a1
        minimum[ib], maximum[ib] = self.b0, self.b1
        minimum[ik], maximum[ik] = self.k - self.padding, self.k + self.padding
        return AABB(Point3(*minimum), Point3(*maximum))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.a0}, {self.a1}, {self.b0}, {self.b1}, k={self.k})"
        )


class XYRect(AxisAlignedRect):
    """Rectangle x0..x1 by y0..y1 in the plane z = k."""

    axes = (0, 1, 2)


class XZRect(AxisAlignedRect):
    """Rectangle x0..x1 by z0..z1 in the plane y = k."""

    axes = (0, 2, 1)


class YZRect(AxisAlignedRect):
    """Rectangle y0..y1 by z0..z1 in the plane x = k."""

    axes = (1, 2, 0)


class HittableList(Hittable):
    """A collection of hittable objects."""

    def __init__(self, objects: Optional[Iterable[Hittable]] = None):
        self.objects: list[Hittable] = list(objects) if objects is not None else []

    def add(self, obj: Hittable) -> None:
        """Add an object to the list."""
        self.objects.append(obj)

    def clear(self) -> None:
        """Remove all objects."""
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Find the closest intersection among all objects.

        Each object is queried with the window shrunk to the closest hit
        so far, which yields the nearest hit without sorting.
        """
        closest_hit: Optional[HitRecord] = None
        closest_t = t_max

        for obj in self.objects:
            hit_record = obj.hit(ray, t_min, closest_t)
            if hit_record is not None:
                closest_hit = hit_record
                closest_t = hit_record.t

        return closest_hit

    def bounding_box(self) -> Optional[AABB]:
        """Return the AABB containing all objects."""
        if not self.objects:
            return None

        output_box: Optional[AABB] = None

        for obj in self.objects:
            box = obj.bounding_box()
            if box is None:
                return None
            output_box = box if output_box is None else AABB.surrounding_box(output_box, box)

        return output_box

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)


class Box(Hittable):
    """An axis-aligned box built from six rectangles."""

    def __init__(self, p0: Point3, p1: Point3, material: Optional[Material] = None):
        """Create a box from two opposite corners.

        Args:
            p0: One corner of the box
            p1: Opposite corner of the box
            material: Material shared by all six faces
        """
        self.box_min = Point3.from_array(np.minimum(p0._data, p1._data))
        self.box_max = Point3.from_array(np.maximum(p0._data, p1._data))
        self.material = material

        lo, hi = self.box_min, self.box_max
        self.sides = HittableList([
            XYRect(lo.x, hi.x, lo.y, hi.y, hi.z, material),
            XYRect(lo.x, hi.x, lo.y, hi.y, lo.z, material),
            XZRect(lo.x, hi.x, lo.z, hi.z, hi.y, material),
            XZRect(lo.x, hi.x, lo.z, hi.z, lo.y, material),
            YZRect(lo.y, hi.y, lo.z, hi.z, hi.x, material),
            YZRect(lo.y, hi.y, lo.z, hi.z, lo.x, material),
        ])

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        return self.sides.hit(ray, t_min, t_max)

    def bounding_box(self) -> Optional[AABB]:
        return AABB(self.box_min, self.box_max)

    def __repr__(self) -> str:
        return f"Box(min={self.box_min}, max={self.box_max})"
