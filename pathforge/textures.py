"""
Texture system for the ray tracer.

Implements:
- Solid color textures
- A 3D checker lattice (sign of a product of sines)
- Perlin noise with turbulence, used for a marbled pattern
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Union
import math

import numpy as np

from .vec3 import Color, Point3
from . import sampling


class Texture(ABC):
    """Abstract base class for textures."""

    @abstractmethod
    def value(self, u: float, v: float, point: Point3) -> Color:
        """Get the texture color at the given UV coordinates.

        Args:
            u: Horizontal texture coordinate [0, 1]
            v: Vertical texture coordinate [0, 1]
            point: 3D point in world space (for procedural textures)

        Returns:
            Color at this location
        """
        pass


class SolidColor(Texture):
    """A solid color texture."""

    def __init__(self, color: Color):
        self.color = color

    def value(self, u: float, v: float, point: Point3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidColor({self.color})"


def as_texture(value: Union[Texture, Color]) -> Texture:
    """Wrap a plain color as a SolidColor; pass textures through."""
    if isinstance(value, Texture):
        return value
    return SolidColor(value)


class CheckerTexture(Texture):
    """A 3D checker lattice.

    The cell is picked by the sign of sin(10x)·sin(10y)·sin(10z), so the
    pattern alternates through space rather than across the surface.
    """

    def __init__(self, even: Union[Texture, Color], odd: Union[Texture, Color]):
        """Create a checker texture.

        Args:
            even: Texture (or color) where the sine product is non-negative
            odd: Texture (or color) where the sine product is negative
        """
        self.even = as_texture(even)
        self.odd = as_texture(odd)

    def value(self, u: float, v: float, point: Point3) -> Color:
        sines = math.sin(10 * point.x) * math.sin(10 * point.y) * math.sin(10 * point.z)
        if sines < 0:
            return self.odd.value(u, v, point)
        return self.even.value(u, v, point)


class Perlin:
    """Gradient noise over a permuted integer lattice.

    The gradient table and the three axis permutations are generated once
    at construction and never change afterwards.
    """

    point_count = 256

    def __init__(self, rng: Optional[np.random.Generator] = None):
        """Build the noise tables.

        Args:
            rng: Generator for the tables (defaults to the active generator)
        """
        rng = rng if rng is not None else sampling.get_rng()

        gradients = rng.uniform(-1, 1, (self.point_count, 3))
        lengths = np.linalg.norm(gradients, axis=1)
        # Redraw the (vanishingly rare) near-zero vectors before normalizing
        while np.any(lengths < 1e-8):
            bad = lengths < 1e-8
            gradients[bad] = rng.uniform(-1, 1, (int(bad.sum()), 3))
            lengths = np.linalg.norm(gradients, axis=1)
        self.ranvec = gradients / lengths[:, np.newaxis]

        self.perm_x = rng.permutation(self.point_count)
        self.perm_y = rng.permutation(self.point_count)
        self.perm_z = rng.permutation(self.point_count)

    def noise(self, point: Point3) -> float:
        """Smoothly interpolated noise in roughly [-1, 1]."""
        fx = math.floor(point.x)
        fy = math.floor(point.y)
        fz = math.floor(point.z)
        u = point.x - fx
        v = point.y - fy
        w = point.z - fz
        i, j, k = int(fx), int(fy), int(fz)

        # Hermite smoothing of the fractional offsets
        uu = u * u * (3 - 2 * u)
        vv = v * v * (3 - 2 * v)
        ww = w * w * (3 - 2 * w)

        accum = 0.0
        for di in range(2):
            for dj in range(2):
                for dk in range(2):
                    index = (
                        self.perm_x[(i + di) & 255]
                        ^ self.perm_y[(j + dj) & 255]
                        ^ self.perm_z[(k + dk) & 255]
                    )
                    gradient = self.ranvec[index]
                    weight = (
                        (di * uu + (1 - di) * (1 - uu))
                        * (dj * vv + (1 - dj) * (1 - vv))
                        * (dk * ww + (1 - dk) * (1 - ww))
                    )
                    accum += weight * (
                        gradient[0] * (u - di)
                        + gradient[1] * (v - dj)
                        + gradient[2] * (w - dk)
                    )
        return float(accum)

    def turbulence(self, point: Point3, depth: int = 7) -> float:
        """Multi-octave noise (turbulence)."""
        accum = 0.0
        weight = 1.0
        p = point

        for _ in range(depth):
            accum += weight * self.noise(p)
            weight *= 0.5
            p = p * 2

        return abs(accum)


class NoiseTexture(Texture):
    """Marble-like Perlin texture: 0.5 * (1 + sin(scale*z + 10*turbulence(p)))."""

    def __init__(self, scale: float = 1.0, rng: Optional[np.random.Generator] = None):
        """Create a noise texture.

        Args:
            scale: Frequency of the marble stripes along z
            rng: Generator for the underlying noise tables
        """
        self.scale = scale
        self.noise = Perlin(rng)

    def value(self, u: float, v: float, point: Point3) -> Color:
        t = 0.5 * (1 + math.sin(self.scale * point.z + 10 * self.noise.turbulence(point)))
        return Color(t, t, t)
