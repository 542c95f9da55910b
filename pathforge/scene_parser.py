"""
Scene parameter loading.

A scene file is a flat JSON or YAML mapping of render and camera
parameters. Vectors and colors may be written as lists or as nested
mappings:

Example scene file:
```json
{
  "scene": "cornell_box",
  "image_width": 300,
  "aspect_ratio": 1.0,
  "samples_per_pixel": 200,
  "max_depth": 50,
  "background": {"r": 0, "g": 0, "b": 0},
  "lookfrom": {"x": 278, "y": 278, "z": -800},
  "lookat": [278, 278, 0],
  "vup": [0, 1, 0],
  "vfov": 40.0,
  "aperture": 0.0,
  "dist_to_focus": 10.0,
  "time0": 0.0,
  "time1": 1.0
}
```

A ``background`` of ``null`` selects the sky gradient.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, Any, Optional
import json
import logging

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


@dataclass
class SceneConfig:
    """The resolved parameter bag a render needs."""
    scene: str = 'random'
    image_width: int = 400
    aspect_ratio: float = 16.0 / 9.0
    samples_per_pixel: int = 100
    max_depth: int = 50
    background: Optional[Color] = None
    lookfrom: Point3 = field(default_factory=lambda: Point3(13, 2, 3))
    lookat: Point3 = field(default_factory=lambda: Point3(0, 0, 0))
    vup: Vec3 = field(default_factory=lambda: Vec3(0, 1, 0))
    vfov: float = 20.0
    aperture: float = 0.0
    dist_to_focus: float = 10.0
    time0: float = 0.0
    time1: float = 1.0
    seed: Optional[int] = None

    @property
    def image_height(self) -> int:
        return max(1, int(self.image_width / self.aspect_ratio))

    def make_camera(self) -> Camera:
        """Build the camera described by this configuration."""
        return Camera(
            look_from=self.lookfrom,
            look_at=self.lookat,
            vup=self.vup,
            vfov=self.vfov,
            aspect_ratio=self.aspect_ratio,
            aperture=self.aperture,
            focus_dist=self.dist_to_focus,
            time0=self.time0,
            time1=self.time1
        )

    def render_settings(self) -> RenderSettings:
        """Build the renderer settings described by this configuration."""
        return RenderSettings(
            width=self.image_width,
            height=self.image_height,
            samples_per_pixel=self.samples_per_pixel,
            max_depth=self.max_depth,
            background_color=self.background,
            use_sky_gradient=self.background is None,
            seed=self.seed
        )

    def with_overrides(self, **overrides: Any) -> 'SceneConfig':
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


# Alternative spellings accepted in scene files
_ALIASES = {
    'look_from': 'lookfrom',
    'look_at': 'lookat',
    'focus_dist': 'dist_to_focus',
    'samples': 'samples_per_pixel',
    'width': 'image_width',
    'depth': 'max_depth',
}

_VECTOR_KEYS = {'lookfrom', 'lookat', 'vup'}
_INT_KEYS = {'image_width', 'samples_per_pixel', 'max_depth'}
_FLOAT_KEYS = {'aspect_ratio', 'vfov', 'aperture', 'dist_to_focus', 'time0', 'time1'}
# Divisors of the image width; zero or negative would leave no image
_POSITIVE_KEYS = {'aspect_ratio'}


def _parse_vec3(key: str, data: Any) -> Vec3:
    """Parse a Vec3 from a list or an x/y/z (or r/g/b) mapping."""
    if isinstance(data, (list, tuple)):
        if len(data) != 3:
            raise SceneParseError(f"{key}: expected 3 components, got {len(data)}")
        components = data
    elif isinstance(data, dict):
        if {'r', 'g', 'b'} & data.keys():
            components = [data.get(c, 0) for c in 'rgb']
        else:
            components = [data.get(c, 0) for c in 'xyz']
    else:
        raise SceneParseError(f"{key}: cannot parse a vector from {data!r}")

    try:
        return Vec3(*(float(c) for c in components))
    except (TypeError, ValueError) as e:
        raise SceneParseError(f"{key}: non-numeric component in {data!r}") from e


def _parse_number(key: str, data: Any, kind: type) -> Any:
    if isinstance(data, bool) or not isinstance(data, (int, float, str)):
        raise SceneParseError(f"{key}: expected a number, got {data!r}")
    try:
        value = float(data)
    except ValueError as e:
        raise SceneParseError(f"{key}: expected a number, got {data!r}") from e
    if kind is int:
        if not value.is_integer():
            raise SceneParseError(f"{key}: expected an integer, got {data!r}")
        return int(value)
    return value


def parse_config(data: Dict[str, Any], base: Optional[SceneConfig] = None) -> SceneConfig:
    """Build a SceneConfig from a parsed mapping.

    Args:
        data: Mapping as read from a scene file
        base: Configuration supplying values the mapping leaves out

    Returns:
        The merged configuration
    """
    if not isinstance(data, dict):
        raise SceneParseError(f"Scene description must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(SceneConfig)}
    values: Dict[str, Any] = {}

    for raw_key, raw_value in data.items():
        key = _ALIASES.get(raw_key, raw_key)
        if key not in known:
            logger.debug("Ignoring unknown scene key %r", raw_key)
            continue

        if key in _VECTOR_KEYS:
            values[key] = _parse_vec3(key, raw_value)
        elif key == 'background':
            values[key] = None if raw_value is None else _parse_vec3(key, raw_value)
        elif key in _INT_KEYS:
            values[key] = _parse_number(key, raw_value, int)
        elif key in _FLOAT_KEYS:
            values[key] = _parse_number(key, raw_value, float)
            if key in _POSITIVE_KEYS and not values[key] > 0:
                raise SceneParseError(f"{key}: must be positive, got {raw_value!r}")
        elif key == 'seed':
            values[key] = None if raw_value is None else _parse_number(key, raw_value, int)
        elif key == 'scene':
            values[key] = str(raw_value)

    return replace(base if base is not None else SceneConfig(), **values)


def read_config_data(filepath: str) -> Dict[str, Any]:
    """Read a scene file into a mapping without interpreting it."""
    path = Path(filepath)
    if not path.exists():
        raise SceneParseError(f"Scene file not found: {filepath}")

    content = path.read_text()

    try:
        if path.suffix in ('.yaml', '.yml'):
            data = yaml.safe_load(content)
        elif path.suffix == '.json':
            data = json.loads(content)
        else:
            raise SceneParseError(f"Unsupported scene file type: {path.suffix or '(none)'}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise SceneParseError(f"Malformed scene file {filepath}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SceneParseError(f"Scene file {filepath} must contain a mapping")

    logger.debug("Loaded %d scene keys from %s", len(data), filepath)
    return data


def load_config(filepath: str, base: Optional[SceneConfig] = None) -> SceneConfig:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file (YAML or JSON)
        base: Configuration supplying values the file leaves out

    Returns:
        The resolved SceneConfig
    """
    return parse_config(read_config_data(filepath), base)
