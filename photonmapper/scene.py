"""Spheres, materials and the Cornell box scene."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from .vector import Color, Ray, Vec, dot

EPS = 1e-6
INF = 1e20


class ReflectionType(enum.Enum):
    DIFFUSE = enum.auto()
    SPECULAR = enum.auto()
    REFRACTION = enum.auto()


@dataclass(frozen=True)
class Sphere:
    radius: float
    pos: Vec
    emission: Color
    color: Color
    ref_type: ReflectionType

    def intersect(self, ray: Ray) -> float:
        """Distance along ``ray`` to this sphere, or 0.0 when there is no hit."""
        o_p = self.pos - ray.origin
        b = dot(o_p, ray.direction)
        det = b * b - dot(o_p, o_p) + self.radius * self.radius
        if det < 0.0:
            return 0.0
        sqrt_det = math.sqrt(det)
        t1 = b - sqrt_det
        t2 = b + sqrt_det
        return t1 if t1 > EPS else t2


@dataclass(frozen=True)
class Hit:
    distance: float
    index: int
    sphere: Sphere


@dataclass(frozen=True)
class Scene:
    spheres: tuple[Sphere, ...]
    light_index: int = 0

    def intersect(self, ray: Ray) -> Hit | None:
        """Return the nearest hit along ``ray``, or None."""
        best: Hit | None = None
        nearest = INF
        for index, sphere in enumerate(self.spheres):
            d = sphere.intersect(ray)
            if 0.0 < d < nearest:
                nearest = d
                best = Hit(d, index, sphere)
        return best

    def light(self) -> Sphere:
        return self.spheres[self.light_index]


def cornell_box() -> Scene:
    """The classic Cornell box with a mirror and a glass sphere."""
    d = ReflectionType.DIFFUSE
    return Scene(
        spheres=(
            Sphere(5.0, Vec(50.0, 75.0, 81.6), Color(12, 12, 12), Color(), d),
            Sphere(1e5, Vec(1e5 + 1, 40.8, 81.6), Color(), Color(0.75, 0.25, 0.25), d),
            Sphere(1e5, Vec(-1e5 + 99, 40.8, 81.6), Color(), Color(0.25, 0.25, 0.75), d),
            Sphere(1e5, Vec(50, 40.8, 1e5), Color(), Color(0.75, 0.75, 0.75), d),
            Sphere(1e5, Vec(50, 40.8, -1e5 + 170), Color(), Color(), d),
            Sphere(1e5, Vec(50, 1e5, 81.6), Color(), Color(0.75, 0.75, 0.75), d),
            Sphere(1e5, Vec(50, -1e5 + 81.6, 81.6), Color(), Color(0.75, 0.75, 0.75), d),
            Sphere(16.5, Vec(27, 16.5, 47), Color(), Color(0, 0, 0.3), ReflectionType.SPECULAR),
            Sphere(16.5, Vec(73, 16.5, 78), Color(), Color(0, 0.3, 0.3), ReflectionType.REFRACTION),
        ),
        light_index=0,
    )