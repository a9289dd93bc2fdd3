# search/driver.py
import time
from collections.abc import Sequence

from tpa_star.app.protocols import TriangleGraph
from tpa_star.domain.entities.geometry import Path, Vector
from tpa_star.domain.errors import AdjacencyError, FunnelError
from tpa_star.domain.mesh import NavMesh
from tpa_star.domain.path_state import PathState

from .bounds import EdgeBoundTable
from .hooks import NoopHooks, SearchHooks
from .open_set import OpenSet


class SearchDriver:
    """
    Best-first search over the triangle graph. States are ordered by
    shortest-possible length plus the straight-line distance from the frontier
    edge to the nearest goal; the first goal-reached state popped is optimal.
    """

    def __init__(self, graph: TriangleGraph, *, hooks: SearchHooks | None = None):
        self.graph = graph
        self._hooks = hooks or NoopHooks()
        self._open = OpenSet()
        self._bounds = EdgeBoundTable()
        self.expanded = 0
        self.pruned = 0

    def find_path(
        self, start: Vector, start_triangle: int, goals: Sequence[Vector]
    ) -> Path | None:
        goals = list(goals)
        if not goals:
            raise ValueError("find_path needs at least one goal")
        self._open.clear()
        self._bounds.clear()
        self.expanded = self.pruned = 0

        t0 = time.perf_counter()
        self._hooks.search_start(start=start, start_triangle=start_triangle, goals=len(goals))
        if not self.graph.contains_point(start_triangle, start):
            self._hooks.warning(
                reason="start_outside_triangle", start=start, start_triangle=start_triangle
            )

        initial = PathState(start, start_triangle, self.graph)
        self._hooks.triangle_explored(start_triangle, initial.evaluation())
        self._open.push(initial)

        result = self._run(goals)
        self._hooks.search_end(
            found=result is not None,
            length=result.length if result is not None else None,
            expanded=self.expanded,
            pruned=self.pruned,
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return result

    def _run(self, goals: list[Vector]) -> Path | None:
        while self._open:
            state = self._open.pop()
            if state.goal_reached:
                return state.to_path()
            self.expanded += 1

            for goal in state.reached_goals(goals):
                done = state.clone()
                done.finalize(goal)
                self._hooks.goal_finalized(
                    goal, triangle=done.current, length=done.path_length
                )
                self._open.push(done)

            for triangle in state.explorable_triangles:
                nxt = state.clone()
                try:
                    evaluation = nxt.step_to(triangle, goals)
                except (AdjacencyError, FunnelError) as exc:
                    self._hooks.error(
                        reason="step_failed", triangle=state.current, to=triangle, exc=exc
                    )
                    raise
                self._hooks.triangle_explored(triangle, evaluation)

                edge = nxt.current_edge
                shortest = evaluation.shortest_possible_path_length
                if self._bounds.admits(edge, shortest):
                    self._bounds.record(edge, evaluation.longest_possible_path_length)
                    self._open.push(nxt)
                else:
                    self.pruned += 1
                    self._hooks.candidate_pruned(
                        triangle, edge=edge, shortest=shortest, bound=self._bounds.get(edge)
                    )
        return None


def find_path(
    graph: TriangleGraph,
    start: Vector,
    start_triangle: int,
    goals: Sequence[Vector],
    *,
    hooks: SearchHooks | None = None,
) -> Path | None:
    if isinstance(graph, NavMesh):
        graph.freeze()
    return SearchDriver(graph, hooks=hooks).find_path(start, start_triangle, goals)
