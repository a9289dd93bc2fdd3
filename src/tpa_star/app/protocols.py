from typing import Protocol, runtime_checkable

from tpa_star.domain.entities.geometry import Edge, Vector


@runtime_checkable
class TriangleGraph(Protocol):
    """
    Responsibilities:
      • Enumerate the neighbours of a triangle (by index).
      • Hand out the common edge of two adjacent triangles; the same Edge value
        for both directions, so edges can key lookup tables.
      • Point containment, using ``tolerance`` for boundary points.
    Must not change while a search runs.
    """

    tolerance: float

    def neighbors(self, index: int) -> tuple[int, ...]: ...
    def common_edge(self, i: int, j: int) -> Edge: ...
    def contains_point(self, index: int, p: Vector) -> bool: ...
