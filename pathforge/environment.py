"""
Backgrounds: the radiance a ray picks up when it escapes the scene.

Implements:
- Solid color environment (constant ambient term, black for lit interiors)
- Vertical white-to-blue sky gradient
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Union

from .vec3 import Vec3, Color


class Environment(ABC):
    """Abstract base class for environment lighting."""

    @abstractmethod
    def sample(self, direction: Vec3) -> Color:
        """Get the environment color for a given direction.

        Args:
            direction: The escaping ray's direction (any length)

        Returns:
            Color value from the environment
        """
        pass


class SolidColorEnvironment(Environment):
    """A solid color environment (uniform sky)."""

    def __init__(self, color: Color = None):
        """Create a solid color environment.

        Args:
            color: The background color (black by default)
        """
        self.color = color if color is not None else Color(0, 0, 0)

    def sample(self, direction: Vec3) -> Color:
        return self.color

    def __repr__(self) -> str:
        return f"SolidColorEnvironment({self.color})"


class GradientEnvironment(Environment):
    """A vertical gradient environment (simple sky)."""

    def __init__(
        self,
        horizon_color: Color = None,
        zenith_color: Color = None
    ):
        """Create a gradient environment.

        Args:
            horizon_color: Color looking straight down (white by default)
            zenith_color: Color looking straight up (sky blue by default)
        """
        self.horizon_color = horizon_color if horizon_color is not None else Color(1.0, 1.0, 1.0)
        self.zenith_color = zenith_color if zenith_color is not None else Color(0.5, 0.7, 1.0)

    def sample(self, direction: Vec3) -> Color:
        # Rescale the unit y component from [-1, 1] to [0, 1]
        t = 0.5 * (direction.normalize().y + 1.0)
        return self.horizon_color * (1.0 - t) + self.zenith_color * t

    def __repr__(self) -> str:
        return "GradientEnvironment()"


def as_environment(background: Union[Environment, Color, None]) -> Environment:
    """Coerce a background setting into an Environment.

    ``None`` selects the sky gradient; a plain color becomes a constant
    background.
    """
    if background is None:
        return GradientEnvironment()
    if isinstance(background, Environment):
        return background
    return SolidColorEnvironment(background)
