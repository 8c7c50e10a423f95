"""Small 2-D and 3-D vector types and scalar helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

__all__ = [
    "Vec2",
    "Vec3",
    "rodrigues_rp",
    "saturate",
    "sign",
    "deg_to_rad",
    "rad_to_deg",
]


@dataclass(frozen=True)
class Vec2:
    """An immutable planar vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return Vec2(self.x * factor, self.y * factor)

    def __rmul__(self, factor: float) -> Vec2:
        return self.__mul__(factor)

    def rotate(self, theta: float) -> Vec2:
        """Return this vector rotated counter-clockwise by ``theta`` radians."""
        c, s = math.cos(theta), math.sin(theta)
        return Vec2(self.x * c - self.y * s, self.x * s + self.y * c)

    def angle(self) -> float:
        """Angle from the x axis, in radians."""
        return math.atan2(self.y, self.x)

    def length(self) -> float:
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class Vec3:
    """An immutable spatial vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> Vec3:
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return Vec3(factor * self.x, factor * self.y, factor * self.z)

    def __rmul__(self, factor: float) -> Vec3:
        return self.__mul__(factor)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            -self.x * other.z + self.z * other.x,
            self.x * other.y - self.y * other.x,
        )

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalized(self) -> Vec3:
        """Return the unit vector; a zero vector raises ZeroDivisionError."""
        length = self.length()
        return Vec3(self.x / length, self.y / length, self.z / length)


def rodrigues_rp(n: Vec3, roll: float, pitch: float) -> float:
    """Rotation angle about unit axis ``n`` that yields the given roll and pitch."""
    c = (math.cos(pitch) * math.cos(roll) - n.z * n.z) / (1.0 - n.z * n.z)
    s = (-math.sin(pitch) + n.x * n.z * (c - 1.0)) / n.y
    return math.atan2(s, c)


def saturate(x: float, x_min: float, x_max: float) -> float:
    """Clamp ``x`` into ``[x_min, x_max]``."""
    if x < x_min:
        return x_min
    if x > x_max:
        return x_max
    return x


def sign(x: float) -> float:
    if x < 0.0:
        return -1.0
    if x > 0.0:
        return 1.0
    return 0.0


def deg_to_rad(x: float) -> float:
    return x * math.pi / 180


def rad_to_deg(x: float) -> float:
    return x * 180 / math.pi