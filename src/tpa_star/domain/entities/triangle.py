# domain/entities/triangle.py
from __future__ import annotations

from dataclasses import dataclass

from tpa_star.domain.entities.geometry import TOLERANCE, Edge, Vector
from tpa_star.domain.errors import AdjacencyError, GeometryError


@dataclass(frozen=True, eq=False)
class Triangle:
    a: Vector
    b: Vector
    c: Vector

    def __post_init__(self):
        a, b, c = self.a, self.b, self.c
        if a.is_close(b) or a.is_close(c) or b.is_close(c):
            raise GeometryError(f"triangle vertices overlap: {a!r}, {b!r}, {c!r}")
        if (b - a).cross(c - a) == 0.0:
            raise GeometryError(f"triangle vertices are collinear: {a!r}, {b!r}, {c!r}")

    # Vertex order is irrelevant for identity.
    def __eq__(self, other) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        return frozenset(self.vertices) == frozenset(other.vertices)

    def __hash__(self) -> int:
        return hash(frozenset(self.vertices))

    @property
    def vertices(self) -> tuple[Vector, Vector, Vector]:
        return (self.a, self.b, self.c)

    @property
    def edges(self) -> tuple[Edge, Edge, Edge]:
        return (Edge(self.a, self.b), Edge(self.b, self.c), Edge(self.c, self.a))

    @property
    def centroid(self) -> Vector:
        return Vector((self.a.x + self.b.x + self.c.x) / 3.0, (self.a.y + self.b.y + self.c.y) / 3.0)

    @property
    def area(self) -> float:
        return abs((self.b - self.a).cross(self.c - self.a)) / 2.0

    def shared_vertices(self, other: Triangle, tol: float = TOLERANCE) -> list[Vector]:
        return [v for v in self.vertices if any(v.is_close(w, tol) for w in other.vertices)]

    def common_edge(self, other: Triangle, tol: float = TOLERANCE) -> Edge:
        shared = self.shared_vertices(other, tol)
        if len(shared) != 2:
            raise AdjacencyError(
                f"triangles share {len(shared)} vertices, an edge needs exactly 2: {self!r} / {other!r}"
            )
        return Edge(*shared)

    def distance_to(self, p: Vector) -> float:
        """0 inside, else the distance to the closest side."""
        if self._barycentric_inside(p):
            return 0.0
        return min(e.distance_to(p) for e in self.edges)

    def contains_point(self, p: Vector, tol: float = TOLERANCE) -> bool:
        # the boundary band uses the same tolerance as point identity, so a point on a
        # shared side belongs to both triangles
        if self._barycentric_inside(p):
            return True
        return any(e.distance_to(p) < tol for e in self.edges)

    def _barycentric_inside(self, p: Vector) -> bool:
        v0, v1, v2 = self.c - self.a, self.b - self.a, p - self.a
        dot00, dot01, dot02 = v0.dot(v0), v0.dot(v1), v0.dot(v2)
        dot11, dot12 = v1.dot(v1), v1.dot(v2)
        inv = 1.0 / (dot00 * dot11 - dot01 * dot01)
        u = (dot11 * dot02 - dot01 * dot12) * inv
        v = (dot00 * dot12 - dot01 * dot02) * inv
        return u >= 0.0 and v >= 0.0 and u + v <= 1.0

    def __repr__(self) -> str:
        return f"Triangle({self.a!r}, {self.b!r}, {self.c!r})"
