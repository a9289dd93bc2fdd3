# domain/path_state.py
from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from tpa_star.app.protocols import TriangleGraph
from tpa_star.domain.entities.geometry import Edge, Path, Vector
from tpa_star.domain.funnel import FunnelStructure


@dataclass(frozen=True)
class TriangleEvaluation:
    h: float
    shortest_possible_path_length: float
    longest_possible_path_length: float
    estimated_minimal_overall_cost: float


class PathState:
    """
    A partially explored triangle sequence: the funnel through the portals crossed
    so far, plus bounds on the remaining distance from the apex to the frontier
    edge (dg_min <= true <= dg_max) and the straight-line distance from that edge
    to the nearest goal (h).
    """

    def __init__(self, start: Vector, start_triangle: int, graph: TriangleGraph):
        self.graph = graph
        self.funnel = FunnelStructure(start, tolerance=graph.tolerance)
        self.current = start_triangle
        self.previous: int | None = None
        self.current_edge: Edge | None = None
        self.h = 0.0
        self.dg_min = 0.0
        self.dg_max = 0.0
        self.goal_reached = False

    def clone(self) -> PathState:
        other = PathState.__new__(PathState)
        other.__dict__.update(self.__dict__)
        other.funnel = self.funnel.copy()
        return other

    # ---------------- Derived ------------------------

    @property
    def path_length(self) -> float:
        return self.funnel.path_length

    @property
    def shortest_possible_path_length(self) -> float:
        return self.path_length + self.dg_min

    @property
    def longest_possible_path_length(self) -> float:
        return self.path_length + self.dg_max

    @property
    def estimated_minimal_overall_cost(self) -> float:
        return self.shortest_possible_path_length + self.h

    @property
    def explorable_triangles(self) -> tuple[int, ...]:
        return tuple(n for n in self.graph.neighbors(self.current) if n != self.previous)

    def evaluation(self) -> TriangleEvaluation:
        shortest = self.shortest_possible_path_length
        return TriangleEvaluation(
            h=self.h,
            shortest_possible_path_length=shortest,
            longest_possible_path_length=self.longest_possible_path_length,
            estimated_minimal_overall_cost=shortest + self.h,
        )

    def reached_goals(self, goals: Iterable[Vector]) -> list[Vector]:
        return [g for g in goals if self.graph.contains_point(self.current, g)]

    def to_path(self) -> Path:
        return Path.from_points(self.funnel.path)

    # ---------------- Transitions ------------------------

    def step_to(self, triangle: int, goals: Sequence[Vector]) -> TriangleEvaluation:
        edge = self.graph.common_edge(self.current, triangle)
        self.funnel.step_to(edge)

        self.dg_min = self._lower_bound_to(edge)
        self.dg_max = self._upper_bound()
        self.h = min((edge.distance_to(g) for g in goals), default=math.inf)

        self.current_edge = edge
        self.previous, self.current = self.current, triangle
        self.goal_reached = False
        return self.evaluation()

    def finalize(self, goal: Vector) -> None:
        self.funnel.finalize(goal)
        self.dg_min = self.dg_max = self.h = 0.0
        self.goal_reached = True

    # ---------------- Bounds ------------------------

    def _lower_bound_to(self, edge: Edge) -> float:
        """Length of the shortest path from the apex to ``edge`` that stays in the funnel."""
        nodes = self.funnel.nodes
        i = self.funnel.apex_index
        # apex at an end (or alone) already sits on the edge
        if i == 0 or i == len(nodes) - 1:
            return 0.0

        apex = nodes[i]
        to_cp = edge.closest_point_to(apex) - apex
        to_left, to_right = nodes[i - 1] - apex, nodes[i + 1] - apex
        total = 0.0

        if to_left.is_counter_clockwise_from(to_cp):
            if to_right.is_clockwise_from(to_cp):
                return to_cp.length()
            # the right chain hides the closest point
            while to_right.is_counter_clockwise_from(to_cp) and i + 2 < len(nodes):
                total += nodes[i].distance_to(nodes[i + 1])
                i += 1
                to_cp = edge.closest_point_to(nodes[i]) - nodes[i]
                to_right = nodes[i + 1] - nodes[i]
        else:
            while to_left.is_clockwise_from(to_cp) and i - 2 >= 0:
                total += nodes[i].distance_to(nodes[i - 1])
                i -= 1
                to_cp = edge.closest_point_to(nodes[i]) - nodes[i]
                to_left = nodes[i - 1] - nodes[i]

        return total + nodes[i].distance_to(edge.closest_point_to(nodes[i]))

    def _upper_bound(self) -> float:
        nodes, i = self.funnel.nodes, self.funnel.apex_index
        left = sum(p.distance_to(q) for p, q in zip(nodes[: i + 1], nodes[1 : i + 1]))
        right = sum(p.distance_to(q) for p, q in zip(nodes[i:], nodes[i + 1 :]))
        return max(left, right)

    def __repr__(self) -> str:
        return (
            f"PathState(current={self.current}, previous={self.previous}, "
            f"cost={self.estimated_minimal_overall_cost:.5g}, goal_reached={self.goal_reached})"
        )
