"""Two-dimensional vectors and the rigid transforms used by game objects."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec2:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        """Unit vector in the same direction; a zero vector raises ValueError."""
        norm = self.length()
        if norm == 0.0:
            raise ValueError("cannot normalise a zero-length vector")
        return self / norm

    def dot(self, other: Vec2) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vec2) -> float:
        """The z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x


def rotate(v: Vec2, angle: float) -> Vec2:
    """Rotate ``v`` counter-clockwise by ``angle`` radians."""
    c, s = math.cos(angle), math.sin(angle)
    return Vec2(v.x * c - v.y * s, v.x * s + v.y * c)


def local_to_world(p: Vec2, position: Vec2, rotation: float) -> Vec2:
    """Map a point from an object's local frame into world coordinates."""
    return rotate(p, rotation) + position


def world_to_local(p: Vec2, position: Vec2, rotation: float) -> Vec2:
    """Map a world point into the local frame of an object."""
    return rotate(p - position, -rotation)