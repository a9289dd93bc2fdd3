# domain/entities/geometry.py
from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import numpy as np

from tpa_star.domain.errors import GeometryError

# Two points closer than this are the same point (strict: a distance equal to it is not).
TOLERANCE = 1e-5


@dataclass(frozen=True)
class Vector:
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> Vector:
        return Vector(self.x * k, self.y * k)

    __rmul__ = __mul__

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector) -> float:
        """z component of the cross product (y axis pointing up)."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_close(self, other: Vector, tol: float = TOLERANCE) -> bool:
        return self.distance_to(other) < tol

    # Both predicates are strict: parallel vectors are neither.
    def is_counter_clockwise_from(self, other: Vector) -> bool:
        return other.cross(self) > 0.0

    def is_clockwise_from(self, other: Vector) -> bool:
        return other.cross(self) < 0.0

    def __repr__(self) -> str:
        return f"Vector({self.x:g}, {self.y:g})"


@dataclass(frozen=True, eq=False)
class Edge:
    """Unordered segment between two distinct points."""

    a: Vector
    b: Vector

    def __post_init__(self):
        if self.a.is_close(self.b):
            raise GeometryError(f"edge endpoints are equal: {self.a!r} and {self.b!r}")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return (self.a == other.a and self.b == other.b) or (
            self.a == other.b and self.b == other.a
        )

    def __hash__(self) -> int:
        return hash(frozenset((self.a, self.b)))

    @property
    def length(self) -> float:
        return self.a.distance_to(self.b)

    def has_endpoint(self, p: Vector, tol: float = TOLERANCE) -> bool:
        return self.a.is_close(p, tol) or self.b.is_close(p, tol)

    def other_endpoint(self, p: Vector, tol: float = TOLERANCE) -> Vector:
        if self.a.is_close(p, tol):
            return self.b
        if self.b.is_close(p, tol):
            return self.a
        raise GeometryError(f"{p!r} is not an endpoint of {self!r}")

    def closest_point_to(self, p: Vector) -> Vector:
        ab = self.b - self.a
        t = (p - self.a).dot(ab) / ab.dot(ab)
        t = max(0.0, min(1.0, t))
        return self.a + ab * t

    def distance_to(self, p: Vector) -> float:
        if p == self.a or p == self.b:
            return 0.0
        return p.distance_to(self.closest_point_to(p))

    def contains_point(self, p: Vector, tol: float = TOLERANCE) -> bool:
        return self.distance_to(p) < tol

    def __repr__(self) -> str:
        return f"Edge({self.a!r}, {self.b!r})"


def polyline_length(points: Iterable[Vector]) -> float:
    pts = list(points)
    return sum(p.distance_to(q) for p, q in zip(pts, pts[1:]))


@dataclass(frozen=True)
class Path:
    points: tuple[Vector, ...]
    length: float

    @classmethod
    def from_points(cls, points: Iterable[Vector]) -> Path:
        pts = tuple(points)
        return cls(pts, polyline_length(pts))

    @property
    def start(self) -> Vector:
        return self.points[0]

    @property
    def end(self) -> Vector:
        return self.points[-1]

    def as_array(self) -> np.ndarray:
        return np.array([(p.x, p.y) for p in self.points], dtype=float).reshape(-1, 2)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Vector]:
        return iter(self.points)
