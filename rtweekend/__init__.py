"""
rtweekend - A Monte Carlo ray tracer for spheres

Traces jittered camera rays through a scene of spheres with:
- Lambertian, metal and dielectric materials
- Thin-lens depth of field
- Sky-gradient background lighting
- Gamma-corrected 8-bit PPM and PNG output
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color, dot, cross, unit_vector, reflect, refract
from .ray import Ray
from .shapes import Hittable, HitRecord, Sphere, HittableList
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric
from .camera import Camera
from .renderer import Renderer, RenderSettings, ray_color, sky_color, write_color, render
from .image import ImageBuffer
from .scenes import random_scene, simple_scene
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
