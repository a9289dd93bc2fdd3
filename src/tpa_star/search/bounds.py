# search/bounds.py
from tpa_star.domain.entities.geometry import Edge


class EdgeBoundTable:
    """Smallest known upper bound on the path length to each frontier edge."""

    def __init__(self):
        self._best: dict[Edge, float] = {}

    def admits(self, edge: Edge, shortest: float) -> bool:
        # a candidate survives unless some state already guarantees strictly less
        best = self._best.get(edge)
        return best is None or not best < shortest

    def record(self, edge: Edge, longest: float) -> float:
        best = min(self._best.get(edge, longest), longest)
        self._best[edge] = best
        return best

    def get(self, edge: Edge) -> float | None:
        return self._best.get(edge)

    def clear(self) -> None:
        self._best.clear()

    def __len__(self) -> int:
        return len(self._best)

    def __contains__(self, edge: Edge) -> bool:
        return edge in self._best
