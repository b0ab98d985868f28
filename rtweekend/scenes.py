"""
Built-in scenes.

Each scene comes with a camera factory so the CLI can pick both by name.
"""

from __future__ import annotations
from typing import Callable, Dict, Tuple

import numpy as np

from .vec3 import Vec3, Color, Point3
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric


def random_scene(rng: np.random.Generator) -> HittableList:
    """Create the cover scene: a field of small random spheres and three big ones."""
    world = HittableList()

    ground_material = Lambertian(Color(0.5, 0.5, 0.5))
    world.add(Sphere(Point3(0, -1000, 0), 1000, ground_material))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = Point3(a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random())

            # Keep clear of the big metal sphere
            if (center - Point3(4, 0.2, 0)).length() <= 0.9:
                continue

            sphere_material: Material
            if choose_mat < 0.8:
                # diffuse
                albedo = Color.random(rng) * Color.random(rng)
                sphere_material = Lambertian(albedo)
            elif choose_mat < 0.95:
                # metal
                albedo = Color.random(rng, 0.5, 1)
                fuzz = rng.uniform(0, 0.5)
                sphere_material = Metal(albedo, fuzz)
            else:
                # glass
                sphere_material = Dielectric(1.5)
            world.add(Sphere(center, 0.2, sphere_material))

    world.add(Sphere(Point3(0, 1, 0), 1.0, Dielectric(1.5)))
    world.add(Sphere(Point3(-4, 1, 0), 1.0, Lambertian(Color(0.4, 0.2, 0.1))))
    world.add(Sphere(Point3(4, 1, 0), 1.0, Metal(Color(0.7, 0.6, 0.5), 0.0)))

    return world


def random_scene_camera(aspect_ratio: float) -> Camera:
    return Camera(
        look_from=Point3(13, 2, 3),
        look_at=Point3(0, 0, 0),
        vup=Vec3(0, 1, 0),
        vfov=20,
        aspect_ratio=aspect_ratio,
        aperture=0.1,
        focus_dist=10.0
    )


def simple_scene(rng: np.random.Generator = None) -> HittableList:
    """Create a small scene with a hollow glass shell.

    The shell is two spheres sharing one Dielectric: the outer one with a
    positive radius and the inner one with a negative radius, so its
    normals point inward. ``rng`` is accepted for a uniform factory
    signature and is unused.
    """
    world = HittableList()

    ground = Lambertian(Color(0.8, 0.8, 0.0))
    blue = Lambertian(Color(0.1, 0.2, 0.5))
    glass = Dielectric(1.5)
    brass = Metal(Color(0.8, 0.6, 0.2), 0.0)

    world.add(Sphere(Point3(0.0, -100.5, -1.0), 100.0, ground))
    world.add(Sphere(Point3(0.0, 0.0, -1.0), 0.5, blue))
    world.add(Sphere(Point3(4.0, 0.0, 1.0), 0.5, glass))
    world.add(Sphere(Point3(4.0, 0.0, 1.0), -0.45, glass))
    world.add(Sphere(Point3(3.0, 0.0, -1.0), 0.5, brass))

    return world


def simple_scene_camera(aspect_ratio: float) -> Camera:
    look_from = Point3(8, 2, 6)
    look_at = Point3(2, 0, 0)
    return Camera(
        look_from=look_from,
        look_at=look_at,
        vup=Vec3(0, 1, 0),
        vfov=30,
        aspect_ratio=aspect_ratio,
        aperture=0.05,
        focus_dist=(look_from - look_at).length()
    )


SceneFactory = Callable[[np.random.Generator], HittableList]
CameraFactory = Callable[[float], Camera]

SCENES: Dict[str, Tuple[SceneFactory, CameraFactory]] = {
    'random': (random_scene, random_scene_camera),
    'simple': (simple_scene, simple_scene_camera),
}
