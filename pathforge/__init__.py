"""
PathForge - A Python Path Tracing Renderer

An offline renderer that simulates light transport with stochastic
recursive ray tracing, with support for:
- Spheres, moving spheres, axis-aligned rectangles and boxes
- Translate / rotate instancing
- Lambertian, metal, dielectric and emissive materials
- Constant density participating media (fog, smoke)
- Checker and Perlin noise textures
- Thin lens depth of field and shutter motion blur
- Plain-text PPM and PNG output
"""

__version__ = "0.1.0"
__author__ = "PathForge Team"

from .vec3 import Vec3, Point3, Color, unit_vector
from .ray import Ray
from .shapes import (
    HitRecord, Hittable, AABB, Sphere, MovingSphere,
    AxisAlignedRect, XYRect, XZRect, YZRect, Box, HittableList
)
from .transforms import Translate, RotateY
from .textures import Texture, SolidColor, CheckerTexture, Perlin, NoiseTexture
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, DiffuseLight, reflectance
from .volumes import Isotropic, ConstantMedium, create_smoke
from .camera import Camera
from .environment import Environment, SolidColorEnvironment, GradientEnvironment
from .renderer import Renderer, RenderSettings, ray_color
from .image_io import write_ppm, read_ppm, save_image
from .scene_parser import SceneConfig, SceneParseError, parse_config, load_config
from .scenes import SCENES, build_world, default_config, scene_names
