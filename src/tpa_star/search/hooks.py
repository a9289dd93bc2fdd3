# search/hooks.py
from collections.abc import Callable
from typing import Protocol

from tpa_star.domain.entities.geometry import Edge, Vector
from tpa_star.domain.path_state import TriangleEvaluation

ExploredCallback = Callable[[int, TriangleEvaluation], None]


class SearchHooks(Protocol):
    def search_start(self, *, start: Vector, start_triangle: int, goals: int): ...
    def search_end(self, *, found: bool, length, expanded: int, pruned: int, wall_ms: float): ...
    def triangle_explored(self, triangle: int, evaluation: TriangleEvaluation): ...
    def candidate_pruned(self, triangle: int, *, edge: Edge, shortest: float, bound: float): ...
    def goal_finalized(self, goal: Vector, *, triangle: int, length: float): ...
    def warning(self, *, reason: str, **kw): ...
    def error(self, *, reason: str, exc: BaseException, **kw): ...


class NoopHooks:
    def search_start(self, **_):
        pass

    def search_end(self, **_):
        pass

    def triangle_explored(self, *_, **__):
        pass

    def candidate_pruned(self, *_, **__):
        pass

    def goal_finalized(self, *_, **__):
        pass

    def warning(self, **_):
        pass

    def error(self, **_):
        pass


class CallbackHooks(NoopHooks):
    """Forwards exploration snapshots to a plain ``(triangle, evaluation)`` callable."""

    def __init__(self, callback: ExploredCallback):
        self.callback = callback

    def triangle_explored(self, triangle: int, evaluation: TriangleEvaluation):
        self.callback(triangle, evaluation)


class FanoutHooks:
    def __init__(self, *hooks: SearchHooks):
        self.hooks = hooks

    def search_start(self, **kw):
        for h in self.hooks:
            h.search_start(**kw)

    def search_end(self, **kw):
        for h in self.hooks:
            h.search_end(**kw)

    def triangle_explored(self, triangle, evaluation):
        for h in self.hooks:
            h.triangle_explored(triangle, evaluation)

    def candidate_pruned(self, triangle, **kw):
        for h in self.hooks:
            h.candidate_pruned(triangle, **kw)

    def goal_finalized(self, goal, **kw):
        for h in self.hooks:
            h.goal_finalized(goal, **kw)

    def warning(self, **kw):
        for h in self.hooks:
            h.warning(**kw)

    def error(self, **kw):
        for h in self.hooks:
            h.error(**kw)
