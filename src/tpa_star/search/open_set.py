# search/open_set.py
import heapq

from tpa_star.domain.path_state import PathState


class OpenSet:
    """Min-heap of PathStates by estimated overall cost; equal costs pop in insertion order."""

    def __init__(self):
        self._q: list[tuple[float, int, PathState]] = []
        self._seq = 0

    def push(self, state: PathState) -> None:
        self._seq += 1
        heapq.heappush(self._q, (state.estimated_minimal_overall_cost, self._seq, state))

    def pop(self) -> PathState:
        if not self._q:
            raise IndexError("pop from an empty open set")
        return heapq.heappop(self._q)[2]

    def peek_cost(self) -> float | None:
        return self._q[0][0] if self._q else None

    def clear(self) -> None:
        self._q.clear()
        self._seq = 0

    def __len__(self) -> int:
        return len(self._q)

    def __bool__(self) -> bool:
        return bool(self._q)
