"""
Intersectable surfaces.

Every surface implements the Hittable interface with a `hit` method. The
only primitive is the analytic sphere; HittableList aggregates any number
of hittables (including other lists) and reports the nearest hit.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, TYPE_CHECKING
import math

from .vec3 import Vec3, Point3
from .ray import Ray

if TYPE_CHECKING:
    from .materials import Material


@dataclass
class HitRecord:
    """Where and how a ray met a surface.

    ``normal`` is unit length and opposes the incoming ray; ``front_face``
    tells whether that is the surface's own outward side. ``material`` is
    the sphere's instance, shared rather than copied.
    """
    point: Point3
    normal: Vec3
    t: float
    front_face: bool = True
    material: Optional[Material] = None

    def set_face_normal(self, ray: Ray, outward_normal: Vec3) -> None:
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else -outward_normal


class Hittable(ABC):
    """Anything a ray can strike."""

    @abstractmethod
    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """Return the nearest intersection with ``t_min <= t <= t_max``, or None."""


class Sphere(Hittable):
    """Analytic sphere.

    A negative ``radius`` keeps the same surface but turns the outward
    normal inward; pairing it with a positive sphere of the same material
    models a hollow glass shell.
    """

    def __init__(self, center: Point3, radius: float, material: Optional[Material] = None):
        self.center = center
        self.radius = radius
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        # |O + tD - C|^2 = r^2 with the linear coefficient halved
        oc = ray.origin - self.center
        a = ray.direction.length_squared()
        half_b = oc.dot(ray.direction)
        c = oc.length_squared() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0:
            return None
        sqrtd = math.sqrt(discriminant)

        # Near root first, far root only if the near one is out of range
        root = (-half_b - sqrtd) / a
        if root < t_min or t_max < root:
            root = (-half_b + sqrtd) / a
            if root < t_min or t_max < root:
                return None

        point = ray.at(root)
        outward_normal = (point - self.center) / self.radius

        rec = HitRecord(point=point, normal=outward_normal, t=root, material=self.material)
        rec.set_face_normal(ray, outward_normal)
        return rec

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"


class HittableList(Hittable):
    """Ordered group of hittables searched as one surface."""

    def __init__(self, objects: Optional[list[Hittable]] = None):
        self.objects: list[Hittable] = objects if objects is not None else []

    def add(self, obj: Hittable) -> None:
        self.objects.append(obj)

    def clear(self) -> None:
        self.objects.clear()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        # Each hit shrinks the upper bound, so later members only win if closer
        nearest: Optional[HitRecord] = None
        upper = t_max

        for obj in self.objects:
            rec = obj.hit(ray, t_min, upper)
            if rec is not None:
                nearest = rec
                upper = rec.t

        return nearest

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self.objects)
