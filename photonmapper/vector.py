"""Three-component vectors and rays."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vec:
    """An immutable 3D vector, also used as an RGB colour."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec) -> Vec:
        if not isinstance(other, Vec):
            return NotImplemented
        return Vec(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec) -> Vec:
        if not isinstance(other, Vec):
            return NotImplemented
        return Vec(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vec:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vec:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec:
        return Vec(-self.x, -self.y, -self.z)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def max_component(self) -> float:
        return max(self.x, self.y, self.z)


Color = Vec


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin and a unit-length direction."""

    origin: Vec
    direction: Vec


def dot(a: Vec, b: Vec) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross(a: Vec, b: Vec) -> Vec:
    return Vec(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


def multiply(a: Vec, b: Vec) -> Vec:
    """Component-wise product."""
    return Vec(a.x * b.x, a.y * b.y, a.z * b.z)


def normalize(v: Vec) -> Vec:
    """Return ``v`` scaled to unit length; a zero vector raises ZeroDivisionError."""
    return v / v.length()


def orthonormal_basis(w: Vec) -> tuple[Vec, Vec, Vec]:
    """Build ``(u, v, w)`` around the unit vector ``w``."""
    if abs(w.x) > 0.1:
        u = normalize(cross(Vec(0.0, 1.0, 0.0), w))
    else:
        u = normalize(cross(Vec(1.0, 0.0, 0.0), w))
    v = cross(w, u)
    return u, v, w