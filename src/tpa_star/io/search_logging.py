# io/search_logging.py
import json
import logging
import sys

from tpa_star.app.events import CandidatePruned, GoalFinalized, SearchFinished, TriangleExplored
from tpa_star.domain.entities.geometry import Edge, Vector
from tpa_star.domain.path_state import TriangleEvaluation
from tpa_star.io.recorder import Recorder
from tpa_star.search.hooks import NoopHooks


def _default_json_logger(name="tpa_star", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                if record.exc_info:
                    payload["exc"] = self.formatException(record.exc_info)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


def _xy(p: Vector) -> tuple[float, float]:
    return (p.x, p.y)


def _edge(e: Edge) -> tuple[tuple[float, float], tuple[float, float]]:
    return (_xy(e.a), _xy(e.b))


class SearchLogging(NoopHooks):
    """
    Shapes search hook calls into JSON log lines and, when a recorder is attached,
    into search records (TriangleExplored, CandidatePruned, GoalFinalized, SearchFinished).
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)
        self._seq = 0
        self._explored = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    def _record(self, cls, **fields):
        if self.recorder:
            self._seq += 1
            self.recorder.emit(cls(run_id=self.run_id, seq=self._seq, **fields))

    # --------------------------------------------------------

    # search lifecycle

    def search_start(self, *, start: Vector, start_triangle: int, goals: int):
        self._seq = 0
        self._explored = 0
        self._emit(
            "INFO", "search_start", start=_xy(start), start_triangle=start_triangle, goals=goals
        )

    def search_end(self, *, found: bool, length, expanded: int, pruned: int, wall_ms: float):
        self._emit(
            "INFO",
            "search_end",
            found=found,
            length=length,
            expanded=expanded,
            pruned=pruned,
            explored=self._explored,
            wall_ms=wall_ms,
        )
        self._record(SearchFinished, found=found, length=length, expanded=expanded, pruned=pruned)

    # exploration

    def triangle_explored(self, triangle: int, evaluation: TriangleEvaluation):
        self._explored += 1
        if self.debug and (self._explored % self.sample_every) == 0:
            self._emit(
                "DEBUG",
                "triangle_explored",
                triangle=triangle,
                h=evaluation.h,
                shortest=evaluation.shortest_possible_path_length,
                longest=evaluation.longest_possible_path_length,
                estimated_cost=evaluation.estimated_minimal_overall_cost,
            )
        self._record(
            TriangleExplored,
            triangle=triangle,
            h=evaluation.h,
            shortest=evaluation.shortest_possible_path_length,
            longest=evaluation.longest_possible_path_length,
            estimated_cost=evaluation.estimated_minimal_overall_cost,
        )

    def candidate_pruned(self, triangle: int, *, edge: Edge, shortest: float, bound: float):
        if self.debug:
            self._emit(
                "DEBUG", "candidate_pruned", triangle=triangle, edge=_edge(edge), shortest=shortest, bound=bound
            )
        self._record(CandidatePruned, triangle=triangle, edge=_edge(edge), shortest=shortest, bound=bound)

    def goal_finalized(self, goal: Vector, *, triangle: int, length: float):
        if self.debug:
            self._emit("DEBUG", "goal_finalized", goal=_xy(goal), triangle=triangle, length=length)
        self._record(GoalFinalized, triangle=triangle, goal=_xy(goal), length=length)

    def warning(self, *, reason: str, **kw):
        shaped = {k: _xy(v) if isinstance(v, Vector) else v for k, v in kw.items()}
        self._emit("WARNING", "search_warning", reason=reason, **shaped)

    def error(self, *, reason: str, exc: BaseException, **kw):
        shaped = {k: _xy(v) if isinstance(v, Vector) else v for k, v in kw.items()}
        self._emit("ERROR", "search_error", reason=reason, error=str(exc), **shaped)
