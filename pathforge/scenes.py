"""
Built-in scenes.

Each entry pairs a world builder with the camera and render defaults
that frame it. Builders draw any randomness from the active generator,
so a seeded context reproduces the same world.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from .vec3 import Vec3, Point3, Color
from .shapes import Sphere, MovingSphere, XYRect, XZRect, YZRect, Box, HittableList, Hittable
from .transforms import Translate, RotateY
from .materials import Material, Lambertian, Metal, Dielectric, DiffuseLight
from .textures import CheckerTexture, NoiseTexture
from .volumes import create_smoke
from .scene_parser import SceneConfig
from . import sampling


def weekend_scene() -> HittableList:
    """Five spheres on a large ground sphere: diffuse, glass, hollow glass, fuzzy metal."""
    world = HittableList()

    material_ground = Lambertian(Color(0.8, 0.8, 0.0))
    material_center = Lambertian(Color(0.1, 0.2, 0.5))
    material_left = Dielectric(1.5)
    # An air bubble inside the glass sphere makes it a hollow shell
    material_bubble = Dielectric(1.0 / 1.5)
    material_right = Metal(Color(0.8, 0.6, 0.2), 1.0)

    world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, material_ground))
    world.add(Sphere(Point3(0.0, 0.0, -1.2), 0.5, material_center))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.5, material_left))
    world.add(Sphere(Point3(-1.0, 0.0, -1.0), 0.4, material_bubble))
    world.add(Sphere(Point3(1.0, 0.0, -1.0), 0.5, material_right))

    return world


def random_scene() -> HittableList:
    """A grid of small random spheres around three large feature spheres."""
    world = HittableList()

    checker = CheckerTexture(Color(0.2, 0.3, 0.1), Color(0.9, 0.9, 0.9))
    world.add(Sphere(Point3(0, -100, 0), 100, Lambertian(checker)))

    for a in range(-3, 3):
        for b in range(-3, 3):
            choose_mat = sampling.random_double()
            center = Point3(a + 0.9 * sampling.random_double(), 0.2, b + 0.9 * sampling.random_double())

            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            if choose_mat < 0.8:
                # Diffuse spheres bounce upward during the exposure
                albedo = Color.random() * Color.random()
                center2 = center + Vec3(0, sampling.random_double(0, 0.5), 0)
                world.add(MovingSphere(center, center2, 0.0, 1.0, 0.2, Lambertian(albedo)))
            elif choose_mat < 0.95:
                albedo = Color.random(0.5, 1)
                fuzz = sampling.random_double(0, 0.5)
                world.add(Sphere(center, 0.2, Metal(albedo, fuzz)))
            else:
                world.add(Sphere(center, 0.2, Dielectric(1.5)))

    world.add(Sphere(Point3(0, 1, 0), 0.3, Dielectric(1.5)))
    world.add(Sphere(Point3(-2, 1, 0), 0.3, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(2, 1, 0), 0.3, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def two_spheres() -> HittableList:
    checker = CheckerTexture(Color(0.2, 0.3, 0.1), Color(0.9, 0.9, 0.9))
    material = Lambertian(checker)
    return HittableList([
        Sphere(Point3(0, -10, 0), 10, material),
        Sphere(Point3(0, 10, 0), 10, material),
    ])


def two_perlin_spheres() -> HittableList:
    material = Lambertian(NoiseTexture(4))
    return HittableList([
        Sphere(Point3(0, -100, 0), 100, material),
        Sphere(Point3(0, 1, 0), 1, material),
    ])


def simple_light() -> HittableList:
    """Perlin spheres lit only by a rectangular area light."""
    world = HittableList()

    material = Lambertian(NoiseTexture(4))
    world.add(Sphere(Point3(0, -1000, 0), 1000, material))
    world.add(Sphere(Point3(0, 2, 0), 2, material))

    light = DiffuseLight(Color(4, 4, 4))
    world.add(XYRect(3, 5, 1, 3, -2, light))

    return world


def _cornell_room() -> tuple[HittableList, Material]:
    """The five walls and ceiling light of the 555-unit Cornell box."""
    red = Lambertian(Color(0.65, 0.05, 0.05))
    white = Lambertian(Color(0.73, 0.73, 0.73))
    green = Lambertian(Color(0.12, 0.45, 0.15))
    light = DiffuseLight(Color(7, 7, 7))

    world = HittableList([
        YZRect(0, 555, 0, 555, 555, green),
        YZRect(0, 555, 0, 555, 0, red),
        XZRect(113, 443, 127, 432, 554, light),
        XZRect(0, 555, 0, 555, 555, white),
        XZRect(0, 555, 0, 555, 0, white),
        XYRect(0, 555, 0, 555, 555, white),
    ])
    return world, white


def _cornell_blocks(material: Material) -> tuple[Hittable, Hittable]:
    """The tall and short blocks, rotated and placed inside the room."""
    tall = Box(Point3(0, 0, 0), Point3(165, 330, 165), material)
    tall = Translate(RotateY(tall, 15), Vec3(265, 0, 295))

    short = Box(Point3(0, 0, 0), Point3(165, 165, 165), material)
    short = Translate(RotateY(short, -18), Vec3(130, 0, 65))

    return tall, short


def cornell_box() -> HittableList:
    world, white = _cornell_room()
    for block in _cornell_blocks(white):
        world.add(block)
    return world


def cornell_smoke() -> HittableList:
    """Cornell box whose blocks are replaced by black and white smoke."""
    world, white = _cornell_room()
    tall, short = _cornell_blocks(white)
    world.add(create_smoke(tall))
    world.add(create_smoke(short, color=Color(1, 1, 1)))
    return world


@dataclass(frozen=True)
class SceneEntry:
    """A named world and the configuration that frames it."""
    build: Callable[[], HittableList]
    defaults: Dict[str, Any] = field(default_factory=dict)
    description: str = ''


_SKY_BLUE = Color(0.70, 0.80, 1.00)

_CORNELL_VIEW = dict(
    aspect_ratio=1.0,
    image_width=600,
    samples_per_pixel=200,
    background=Color(0, 0, 0),
    lookfrom=Point3(278, 278, -800),
    lookat=Point3(278, 278, 0),
    vfov=40.0,
    aperture=0.0,
)

SCENES: Dict[str, SceneEntry] = {
    'weekend': SceneEntry(
        weekend_scene,
        dict(background=None, lookfrom=Point3(-2, 2, 1), lookat=Point3(0, 0, -1),
             vfov=20.0, aperture=0.0, dist_to_focus=3.4, time1=0.0),
        "Glass, hollow glass, diffuse and metal spheres under a sky gradient",
    ),
    'random': SceneEntry(
        random_scene,
        dict(background=_SKY_BLUE, aperture=0.1),
        "Random small spheres with motion blur and depth of field",
    ),
    'two_spheres': SceneEntry(
        two_spheres,
        dict(background=_SKY_BLUE),
        "Two checker-textured spheres",
    ),
    'two_perlin_spheres': SceneEntry(
        two_perlin_spheres,
        dict(background=_SKY_BLUE),
        "Perlin marble ground and sphere",
    ),
    'simple_light': SceneEntry(
        simple_light,
        dict(background=Color(0, 0, 0), samples_per_pixel=400,
             lookfrom=Point3(26, 3, 6), lookat=Point3(0, 2, 0)),
        "Marble spheres lit by a rectangular area light",
    ),
    'cornell_box': SceneEntry(cornell_box, _CORNELL_VIEW, "Cornell box with two blocks"),
    'cornell_smoke': SceneEntry(cornell_smoke, _CORNELL_VIEW, "Cornell box with two smoke blocks"),
}


def scene_names() -> List[str]:
    return sorted(SCENES)


def _entry(name: str) -> SceneEntry:
    try:
        return SCENES[name]
    except KeyError:
        raise ValueError(f"Unknown scene {name!r}; choose from: {', '.join(scene_names())}") from None


def build_world(name: str) -> HittableList:
    """Construct the named world."""
    return _entry(name).build()


def default_config(name: str) -> SceneConfig:
    """The configuration a named scene renders with unless overridden."""
    return SceneConfig(scene=name, **_entry(name).defaults)
