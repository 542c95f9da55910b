"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive light transport (emission + attenuation * incoming), depth limited
- Antialiasing by jittered samples per pixel
- Gamma encoding and clamping to 8-bit output
"""

from __future__ import annotations
import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Optional, Callable, Union
import numpy as np

from .vec3 import Color
from .ray import Ray
from .camera import Camera
from .shapes import Hittable
from .environment import Environment, GradientEnvironment, SolidColorEnvironment, as_environment
from . import sampling

logger = logging.getLogger(__name__)

# Smallest accepted hit distance; avoids re-hitting the surface a ray leaves
T_MIN = 0.001


def ray_color(
    ray: Ray,
    background: Union[Environment, Color, None],
    world: Hittable,
    depth: int
) -> Color:
    """Compute the radiance carried back along a ray.

    Equivalent to the recursion
        color(ray, d) = emitted + attenuation * color(scattered, d - 1)
    with black at d <= 0, the background on a miss and the emission alone
    when the material absorbs. It is unrolled into a loop with a running
    attenuation product so large depths do not exhaust the Python stack.

    Args:
        ray: The ray to trace
        background: Environment, constant color, or None for the sky gradient
        world: The scene to trace against
        depth: Remaining bounce budget

    Returns:
        The computed color for this ray
    """
    environment = as_environment(background)
    color = Color(0, 0, 0)
    throughput = Color(1, 1, 1)

    for _ in range(depth):
        hit_record = world.hit(ray, T_MIN, float('inf'))

        if hit_record is None:
            return color + throughput * environment.sample(ray.direction)

        material = hit_record.material
        if material is None:
            # No material - shade by the normal
            return color + throughput * (hit_record.normal + Color(1, 1, 1)) * 0.5

        color = color + throughput * material.emitted(hit_record.u, hit_record.v, hit_record.point)

        scatter_result = material.scatter(ray, hit_record)
        if scatter_result is None:
            return color

        throughput = throughput * scatter_result.attenuation
        ray = scatter_result.scattered_ray

    # Bounce budget exhausted: no further light gathered
    return color


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    background_color: Color = None
    use_sky_gradient: bool = False
    gamma: float = 2.0
    seed: Optional[int] = None

    def __post_init__(self):
        if self.background_color is None:
            self.background_color = Color(0.0, 0.0, 0.0)
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image dimensions must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")

    @property
    def environment(self) -> Environment:
        """The background the integrator uses for escaping rays."""
        if self.use_sky_gradient:
            return GradientEnvironment()
        return SolidColorEnvironment(self.background_color)


class Renderer:
    """Single-threaded path tracing renderer."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0),
                called after every finished scanline
        """
        self._progress_callback = callback

    def _random_context(self):
        """Seeded generator for the pass, or the ambient one when unseeded."""
        if self.settings.seed is not None:
            return sampling.use_rng(np.random.default_rng(self.settings.seed))
        return nullcontext()

    def render(self, world: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Row 0 of the result is the top scanline of the image.

        Args:
            world: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Linear HDR image of shape (height, width, 3), already averaged
            over the samples of each pixel
        """
        with self._random_context():
            return self._render(world, camera)

    def render_scene(self, build_world: Callable[[], Hittable], camera: Camera) -> np.ndarray:
        """Build a world and render it under the same generator.

        With a seed set, randomly generated worlds come out identical on
        every run, not just the sampling of the image.
        """
        with self._random_context():
            world = build_world()
            return self._render(world, camera)

    def _render(self, world: Hittable, camera: Camera) -> np.ndarray:
        settings = self.settings
        width = settings.width
        height = settings.height
        samples = settings.samples_per_pixel
        max_depth = settings.max_depth
        environment = settings.environment

        # A single row or column would otherwise divide by zero
        u_scale = max(width - 1, 1)
        v_scale = max(height - 1, 1)

        logger.info(
            "Rendering %dx%d, %d samples/pixel, max depth %d",
            width, height, samples, max_depth
        )
        start_time = time.perf_counter()

        image = np.zeros((height, width, 3), dtype=np.float64)
        rng = sampling.get_rng()

        for row in range(height):
            # Scanline j counts up from the bottom of the image
            j = height - 1 - row
            for i in range(width):
                pixel_color = Color(0, 0, 0)

                for _ in range(samples):
                    u = (i + rng.random()) / u_scale
                    v = (j + rng.random()) / v_scale

                    ray = camera.get_ray(u, v)
                    pixel_color = pixel_color + ray_color(ray, environment, world, max_depth)

                image[row, i] = pixel_color.to_array() / samples

            if self._progress_callback:
                self._progress_callback((row + 1) / height)

        elapsed = time.perf_counter() - start_time
        logger.info(
            "Render finished in %.2fs (%.0f rays/s)",
            elapsed, width * height * samples / elapsed if elapsed > 0 else 0.0
        )
        return image

    def to_ldr(self, hdr_image: np.ndarray) -> np.ndarray:
        """Convert HDR image to 8-bit LDR with gamma correction.

        NaNs (from degenerate geometry) become black and infinities are
        clamped before encoding, so every channel lands in [0, 255].

        Args:
            hdr_image: HDR image array (float64)

        Returns:
            LDR image as uint8 array
        """
        finite = np.nan_to_num(hdr_image, nan=0.0, posinf=1.0, neginf=0.0)
        corrected = np.power(np.clip(finite, 0.0, None), 1.0 / self.settings.gamma)

        # Clamp just below 1 so 256 * x truncates into [0, 255]
        ldr = (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)
        return ldr

    def save_image(self, image: np.ndarray, filename: str, bottom_to_top: bool = False) -> None:
        """Save image to file.

        Args:
            image: Image array (HDR float or LDR uint8)
            filename: Output filename (.ppm is written as plain text,
                anything else through Pillow)
            bottom_to_top: Emit PPM scanlines starting from the bottom row
        """
        from .image_io import save_image

        if image.dtype != np.uint8:
            image = self.to_ldr(image)
        save_image(image, filename, bottom_to_top=bottom_to_top)
