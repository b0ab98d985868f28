"""Tests for the scene description parser."""

import json

import pytest

from rtweekend.vec3 import Vec3, Point3, Color
from rtweekend.materials import Lambertian, Metal, Dielectric
from rtweekend.scene_parser import SceneParser, SceneParseError, load_scene, parse_scene


SCENE_YAML = """
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10

render:
  width: 30
  height: 20
  samples: 4
  max_depth: 10
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]
  glass:
    type: dielectric
    ior: 1.5
  brass:
    type: metal
    albedo: "#cc9933"
    fuzz: 0.2

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground
  - type: sphere
    center: [0, 1, 0]
    radius: 1
    material: glass
  - type: sphere
    center: [0, 1, 0]
    radius: -0.9
    material: glass
  - type: sphere
    center: {x: 4, y: 1, z: 0}
    radius: 1
    material: brass
"""


class TestParseFile:
    """Test loading scene files."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "scene.yaml"
        path.write_text(SCENE_YAML)
        world, camera, settings = load_scene(str(path))

        assert len(world) == 4
        assert camera.origin == Point3(13, 2, 3)
        assert abs(camera.lens_radius - 0.05) < 1e-12
        assert (settings.width, settings.height) == (30, 20)
        assert settings.samples_per_pixel == 4
        assert settings.max_depth == 10
        assert settings.seed == 7

    def test_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps({
            "materials": {"red": {"type": "lambertian", "albedo": [1, 0, 0]}},
            "objects": [{"type": "sphere", "center": [0, 0, -1], "radius": 0.5, "material": "red"}],
        }))
        world, camera, settings = load_scene(str(path))
        assert len(world) == 1
        assert settings.width == 400

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneParseError):
            load_scene(str(tmp_path / "nope.yaml"))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("objects: [unclosed")
        with pytest.raises(SceneParseError):
            load_scene(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(SceneParseError):
            load_scene(str(path))


class TestMaterials:
    """Test material parsing."""

    def test_shared_material_instances(self, tmp_path):
        path = tmp_path / "scene.yml"
        path.write_text(SCENE_YAML)
        parser = SceneParser()
        world, _, _ = parser.parse_file(str(path))
        spheres = list(world)

        assert spheres[1].material is spheres[2].material
        assert spheres[2].radius == -0.9
        assert isinstance(spheres[0].material, Lambertian)

    def test_hex_color_and_fuzz(self):
        world, _, _ = parse_scene({
            "materials": {"brass": {"type": "metal", "albedo": "#cc9933", "fuzz": 0.2}},
            "objects": [{"center": [0, 0, 0], "radius": 1, "material": "brass"}],
        })
        mat = next(iter(world)).material
        assert isinstance(mat, Metal)
        assert mat.fuzz == 0.2
        assert mat.albedo == Color(0.8, 0.6, 0.2)

    def test_inline_material(self):
        world, _, _ = parse_scene({
            "objects": [{"center": [0, 0, 0], "radius": 1,
                         "material": {"type": "dielectric", "ior": 2.4}}],
        })
        mat = next(iter(world)).material
        assert isinstance(mat, Dielectric)
        assert mat.ior == 2.4

    @pytest.mark.parametrize("data", [
        {"materials": {"x": {"type": "plasma"}}},
        {"materials": {"x": {"type": "dielectric", "ior": 0}}},
        {"materials": {"x": {"type": "lambertian", "albedo": [1, 2]}}},
        {"materials": {"x": {"type": "lambertian", "albedo": "#zzzzzz"}}},
        {"objects": [{"center": [0, 0, 0], "radius": 1, "material": "undefined"}]},
        {"objects": [{"center": [0, 0, 0], "radius": 1}]},
        {"objects": [{"type": "cube", "material": {"type": "lambertian"}}]},
        {"objects": [{"center": [0, 0, 0], "radius": 0, "material": {"type": "lambertian"}}]},
        {"materials": ["red"]},
        {"materials": {"x": "lambertian"}},
        {"materials": {"x": {"type": "metal", "fuzz": "rough"}}},
        {"materials": {"x": {"type": "lambertian", "albedo": ["a", 0, 0]}}},
        {"objects": ["sphere"]},
        {"objects": {"type": "sphere"}},
        {"objects": [{"center": ["a", 0, 0], "radius": 1, "material": {"type": "lambertian"}}]},
        {"objects": [{"center": [0, 0, 0], "radius": None, "material": {"type": "lambertian"}}]},
        {"render": [1, 2]},
        {"render": {"width": "wide"}},
        {"render": {"seed": -3}},
        {"camera": [0, 0, 0]},
        {"camera": {"vfov": "wide"}},
    ])
    def test_invalid(self, data):
        with pytest.raises(SceneParseError):
            parse_scene(data)


class TestCameraAndSettings:
    """Test camera and render section parsing."""

    def test_defaults(self):
        world, camera, settings = parse_scene({})
        assert len(world) == 0
        assert camera.origin == Point3(0, 0, 0)
        assert settings.max_depth == 50

    def test_default_aspect_follows_render_size(self):
        _, camera, _ = parse_scene({"render": {"width": 40, "height": 20}, "camera": {"vfov": 90}})
        # Viewport at focus distance 1: tan(45 deg) * 2 high, twice as wide
        assert abs(camera.horizontal.length() - 4.0) < 1e-9

    def test_invalid_render_settings(self):
        with pytest.raises(SceneParseError):
            parse_scene({"render": {"width": 1}})

    def test_degenerate_camera(self):
        with pytest.raises(SceneParseError):
            parse_scene({"camera": {"look_from": [1, 1, 1], "look_at": [1, 1, 1]}})
