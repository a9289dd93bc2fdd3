# domain/funnel.py
from __future__ import annotations

from enum import Enum

from tpa_star.domain.entities.geometry import TOLERANCE, Edge, Vector, polyline_length
from tpa_star.domain.errors import FunnelError


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"
    NONE = "none"


class FunnelStructure:
    """
    Shortest taut path through a sequence of portal edges.

    The funnel is a list of points seen from the apex: the left end first, the
    right end last; ``apex_index`` points at the apex inside it. Everything
    before the apex is the left chain, everything after it the right chain.
    ``path`` holds the committed prefix of the shortest path (start ... apex).
    """

    def __init__(self, start: Vector, *, tolerance: float = TOLERANCE):
        self._nodes: list[Vector] = [start]
        self._apex = 0
        self._path: list[Vector] = [start]
        self.tolerance = tolerance

    def copy(self) -> FunnelStructure:
        other = FunnelStructure.__new__(FunnelStructure)
        other._nodes = list(self._nodes)
        other._apex = self._apex
        other._path = list(self._path)
        other.tolerance = self.tolerance
        return other

    # ---------------- Views ------------------------

    @property
    def nodes(self) -> tuple[Vector, ...]:
        return tuple(self._nodes)

    @property
    def apex_index(self) -> int:
        return self._apex

    @property
    def apex(self) -> Vector:
        return self._nodes[self._apex]

    @property
    def left(self) -> Vector:
        return self._nodes[0]

    @property
    def right(self) -> Vector:
        return self._nodes[-1]

    @property
    def path(self) -> tuple[Vector, ...]:
        return tuple(self._path)

    @property
    def path_length(self) -> float:
        return polyline_length(self._path)

    @property
    def is_single_point(self) -> bool:
        return len(self._nodes) == 1

    # ---------------- Mutation ------------------------

    def step_to(self, edge: Edge) -> None:
        side = self._attach(edge)
        if side is Side.LEFT:
            self._refresh_left()
        elif side is Side.RIGHT:
            self._refresh_right()
        elif side is Side.BOTH:
            raise FunnelError(f"step backwards onto the current final edge {edge!r}")
        elif self.is_single_point:
            self._init(edge)
        else:
            raise FunnelError(
                f"{edge!r} shares no endpoint with the funnel ends {self.left!r} / {self.right!r}"
            )

    def finalize(self, goal: Vector) -> None:
        self._nodes.append(goal)
        self._refresh_right()
        i = self._apex
        # walk the right chain; the goal is the right end, so the walk terminates
        while not self._nodes[i].is_close(goal, self.tolerance):
            i += 1
            self._path.append(self._nodes[i])
        self._apex = i

    # ---------------- Internals ------------------------

    def _attach(self, edge: Edge) -> Side:
        # a lone start point is only ever initialized against the edge
        if self.is_single_point:
            return Side.NONE
        tol = self.tolerance
        left, right = self._nodes[0], self._nodes[-1]
        on_left, on_right = edge.has_endpoint(left, tol), edge.has_endpoint(right, tol)
        if on_left and on_right:
            return Side.BOTH
        if on_left:
            self._nodes.append(edge.other_endpoint(left, tol))
            return Side.RIGHT
        if on_right:
            self._nodes.insert(0, edge.other_endpoint(right, tol))
            self._apex += 1
            return Side.LEFT
        return Side.NONE

    def _init(self, edge: Edge) -> None:
        start = self._nodes[0]
        to_a, to_b = edge.a - start, edge.b - start
        if to_a.is_counter_clockwise_from(to_b):
            self._nodes = [edge.a, start, edge.b]
            self._apex = 1
        elif to_a.is_clockwise_from(to_b):
            self._nodes = [edge.b, start, edge.a]
            self._apex = 1
        # parallel: the start lies on the edge, nothing to add

    def _refresh_right(self) -> None:
        nodes = self._nodes
        popped = True
        while popped and len(nodes) >= 3:
            popped = False
            end = nodes[-1]
            v1, v2 = nodes[-2] - end, nodes[-3] - end
            second = len(nodes) - 2
            if second != self._apex:
                if v1.is_counter_clockwise_from(v2):
                    del nodes[second]
                    popped = True
            elif v1.is_clockwise_from(v2):
                del nodes[second]
                self._apex = second - 1
                self._path.append(nodes[self._apex])
                popped = True

    def _refresh_left(self) -> None:
        nodes = self._nodes
        popped = True
        while popped and len(nodes) >= 3:
            popped = False
            end = nodes[0]
            v1, v2 = nodes[1] - end, nodes[2] - end
            if self._apex != 1:
                if v1.is_clockwise_from(v2):
                    del nodes[1]
                    self._apex -= 1
                    popped = True
            elif v1.is_counter_clockwise_from(v2):
                del nodes[1]
                # the node after the removed apex slides into index 1
                self._path.append(nodes[1])
                popped = True

    def __repr__(self) -> str:
        return f"FunnelStructure(nodes={self._nodes!r}, apex={self._apex})"
