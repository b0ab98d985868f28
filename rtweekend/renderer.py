"""
Renderer module - the heart of the ray tracer.

Implements:
- Recursive path tracing bounded by a maximum depth
- Per-pixel Monte Carlo sampling with jittered camera rays
- Gamma correction and quantization to 8-bit channels
- Row-granular rendering with a deterministic generator per row
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Optional, Callable, List, Tuple

import numpy as np

from .vec3 import Color, unit_vector
from .ray import Ray
from .camera import Camera
from .shapes import Hittable

logger = logging.getLogger(__name__)

Pixel = Tuple[int, int, int]

# Minimum hit distance; suppresses shadow acne from rounding at the ray origin
T_MIN = 0.001


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    t_min: float = T_MIN
    seed: Optional[int] = None

    def __post_init__(self):
        if self.width < 2 or self.height < 2:
            raise ValueError(f"image must be at least 2x2, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.t_min <= 0:
            raise ValueError(f"t_min must be strictly positive, got {self.t_min}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def sky_color(ray: Ray) -> Color:
    """Blend white at the horizon into sky blue overhead.

    Args:
        ray: The escaping ray; only its direction matters

    Returns:
        Background color for this direction
    """
    unit_direction = unit_vector(ray.direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return Color(1.0, 1.0, 1.0) * (1.0 - t) + Color(0.5, 0.7, 1.0) * t


def ray_color(
    ray: Ray,
    scene: Hittable,
    depth: int,
    rng: np.random.Generator,
    t_min: float = T_MIN
) -> Color:
    """Compute the radiance carried back along a ray.

    Args:
        ray: The ray to trace
        scene: The scene to trace against
        depth: Remaining bounce budget
        rng: Random generator for material sampling
        t_min: Shadow-acne epsilon

    Returns:
        The linear-light color for this ray
    """
    if depth <= 0:
        return Color(0, 0, 0)

    hit_record = scene.hit(ray, t_min, math.inf)
    if hit_record is None:
        return sky_color(ray)

    if hit_record.material is None:
        return Color(0, 0, 0)

    scatter_result = hit_record.material.scatter(ray, hit_record, rng)
    if scatter_result is None:
        return Color(0, 0, 0)

    return scatter_result.attenuation * ray_color(
        scatter_result.scattered_ray, scene, depth - 1, rng, t_min
    )


def write_color(pixel_color: Color, samples_per_pixel: int) -> Pixel:
    """Convert a sum of samples into gamma-corrected 8-bit channels.

    Divides by the sample count, applies gamma 2.0 (square root), then
    clamps to [0, 0.999] before scaling by 256 so 1.0 never maps to 256.
    """
    scale = 1.0 / samples_per_pixel
    corrected = np.sqrt(np.maximum(pixel_color.to_array() * scale, 0.0))
    quantized = (256 * np.clip(corrected, 0.0, 0.999)).astype(np.uint8)
    r, g, b = (int(c) for c in quantized)
    return r, g, b


class Renderer:
    """Monte Carlo path tracing renderer."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None
        self._seed_sequence = np.random.SeedSequence(self.settings.seed)

    @property
    def seed(self) -> int:
        """Root entropy for this renderer; pass it back in to reproduce a render."""
        return self._seed_sequence.entropy

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def row_rng(self, j: int) -> np.random.Generator:
        """Generator for scanline ``j``, independent of render order."""
        return np.random.default_rng(
            np.random.SeedSequence(self._seed_sequence.entropy, spawn_key=(j,))
        )

    def render_pixel(
        self,
        scene: Hittable,
        camera: Camera,
        i: int,
        j: int,
        rng: np.random.Generator
    ) -> Color:
        """Sum the radiance of ``samples_per_pixel`` jittered rays through pixel (i, j).

        ``j`` counts scanlines from the bottom of the image.
        """
        width = self.settings.width
        height = self.settings.height
        pixel_color = Color(0, 0, 0)

        for _ in range(self.settings.samples_per_pixel):
            u = (i + rng.random()) / (width - 1)
            v = (j + rng.random()) / (height - 1)
            ray = camera.get_ray(u, v, rng)
            pixel_color += ray_color(ray, scene, self.settings.max_depth, rng, self.settings.t_min)

        return pixel_color

    def render_row(self, scene: Hittable, camera: Camera, j: int) -> List[Pixel]:
        """Render scanline ``j`` (counted from the bottom) left to right.

        A row only reads the scene and its own generator, so rows can be
        handed to separate workers without coordination.
        """
        rng = self.row_rng(j)
        samples = self.settings.samples_per_pixel
        return [
            write_color(self.render_pixel(scene, camera, i, j, rng), samples)
            for i in range(self.settings.width)
        ]

    def render(self, scene: Hittable, camera: Camera) -> List[Pixel]:
        """Render the scene to 8-bit pixels.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            One (r, g, b) triple per pixel, top scanline first, each row
            left to right
        """
        width = self.settings.width
        height = self.settings.height
        logger.info(
            "Rendering %dx%d at %d spp, max depth %d (seed %d)",
            width, height, self.settings.samples_per_pixel,
            self.settings.max_depth, self.seed
        )

        pixels: List[Pixel] = []
        for j in range(height - 1, -1, -1):
            logger.debug("Scanlines remaining: %d", j)
            pixels.extend(self.render_row(scene, camera, j))

            if self._progress_callback:
                self._progress_callback((height - j) / height)

        return pixels


def render(
    scene: Hittable,
    camera: Camera,
    width: int,
    height: int,
    samples_per_pixel: int,
    max_depth: int,
    seed: Optional[int] = None
) -> List[Pixel]:
    """Render ``scene`` through ``camera`` with a one-off Renderer."""
    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
        seed=seed
    )
    return Renderer(settings).render(scene, camera)
