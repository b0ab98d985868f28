"""
Half-lines cast from the camera and from scatter events.
"""

from __future__ import annotations
from .vec3 import Vec3, Point3


class Ray:
    """Points ``origin + t * direction`` for real ``t``.

    ``direction`` may have any non-zero length; hit distances are then
    measured in multiples of it rather than in world units.
    """

    __slots__ = ('origin', 'direction')

    def __init__(self, origin: Point3, direction: Vec3):
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Point3:
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin!r}, direction={self.direction!r})"
