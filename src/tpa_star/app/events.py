# app/events.py
from dataclasses import dataclass


@dataclass(frozen=True)
class SearchRecord:
    run_id: str
    seq: int  # per search, starts at 1


# Exploration
@dataclass(frozen=True)
class TriangleExplored(SearchRecord):
    triangle: int
    h: float
    shortest: float
    longest: float
    estimated_cost: float


@dataclass(frozen=True)
class CandidatePruned(SearchRecord):
    triangle: int
    edge: tuple[tuple[float, float], tuple[float, float]]
    shortest: float
    bound: float


# Outcome
@dataclass(frozen=True)
class GoalFinalized(SearchRecord):
    triangle: int
    goal: tuple[float, float]
    length: float


@dataclass(frozen=True)
class SearchFinished(SearchRecord):
    found: bool
    length: float | None
    expanded: int
    pruned: int
