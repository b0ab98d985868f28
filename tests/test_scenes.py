"""Tests for the built-in scenes."""

import math

import numpy as np

from rtweekend.vec3 import Vec3, Point3
from rtweekend.ray import Ray
from rtweekend.shapes import Sphere
from rtweekend.materials import Lambertian, Metal, Dielectric
from rtweekend.scenes import (
    SCENES, random_scene, random_scene_camera, simple_scene, simple_scene_camera
)


class TestRandomScene:
    """Test the random cover scene."""

    def test_ground_and_big_spheres(self, rng):
        world = random_scene(rng)
        spheres = list(world)

        ground = spheres[0]
        assert ground.center == Point3(0, -1000, 0)
        assert ground.radius == 1000

        glass, diffuse, metal = spheres[-3:]
        assert isinstance(glass.material, Dielectric)
        assert isinstance(diffuse.material, Lambertian)
        assert isinstance(metal.material, Metal)
        assert metal.material.fuzz == 0.0

    def test_small_spheres(self, rng):
        world = random_scene(rng)
        small = list(world)[1:-3]

        # At most one per grid cell
        assert 0 < len(small) <= 22 * 22
        for sphere in small:
            assert sphere.radius == 0.2
            assert sphere.center.y == 0.2
            assert (sphere.center - Point3(4, 0.2, 0)).length() > 0.9
            if isinstance(sphere.material, Metal):
                assert 0 <= sphere.material.fuzz < 0.5
                assert all(0.5 <= c < 1 for c in sphere.material.albedo)
            elif isinstance(sphere.material, Dielectric):
                assert sphere.material.ior == 1.5

    def test_same_seed_same_scene(self):
        a = random_scene(np.random.default_rng(3))
        b = random_scene(np.random.default_rng(3))
        assert len(a) == len(b)
        for s1, s2 in zip(a, b):
            assert s1.center == s2.center

    def test_camera(self):
        cam = random_scene_camera(1.5)
        assert cam.origin == Point3(13, 2, 3)
        assert abs(cam.lens_radius - 0.05) < 1e-12


class TestSimpleScene:
    """Test the simple scene with a hollow glass shell."""

    def test_hollow_shell_shares_material(self):
        spheres = list(simple_scene())
        shell = [s for s in spheres if isinstance(s.material, Dielectric)]

        assert len(shell) == 2
        outer, inner = shell
        assert outer.center == inner.center
        assert outer.radius == 0.5
        assert inner.radius == -0.45
        assert outer.material is inner.material

    def test_blue_sphere_visible_from_origin(self):
        world = simple_scene()
        hit = world.hit(Ray(Point3(0, 0, 0), Vec3(0, 0, -1)), 0.001, math.inf)
        assert hit is not None
        assert abs(hit.t - 0.5) < 1e-9
        assert isinstance(hit.material, Lambertian)

    def test_camera_focused_on_target(self):
        cam = simple_scene_camera(1.5)
        assert cam.origin == Point3(8, 2, 6)


class TestSceneRegistry:
    """Test SCENES lookup."""

    def test_names(self):
        assert set(SCENES) == {"random", "simple"}

    def test_factories_build(self, rng):
        for scene_factory, camera_factory in SCENES.values():
            assert len(scene_factory(rng)) > 0
            camera_factory(16 / 9)
