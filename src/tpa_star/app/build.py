# tpa_star/app/build.py
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from tpa_star.config.models import PathfinderModel, RecorderModel
from tpa_star.domain.entities.geometry import Path, Vector
from tpa_star.domain.entities.triangle import Triangle
from tpa_star.domain.mesh import NavMesh
from tpa_star.io.recorder import JsonlSink, MemorySink, Recorder
from tpa_star.io.search_logging import SearchLogging  # JSON logs
from tpa_star.search.driver import SearchDriver
from tpa_star.search.hooks import CallbackHooks, ExploredCallback, FanoutHooks, NoopHooks, SearchHooks


def _as_vector(p) -> Vector:
    if isinstance(p, Vector):
        return p
    x, y = p
    return Vector(float(x), float(y))


@dataclass
class Pathfinder:
    model: PathfinderModel
    hooks: SearchHooks
    recorder: Recorder | None = None

    @property
    def tolerance(self) -> float:
        return self.model.geometry.tolerance

    def mesh(self, triangles: Iterable[Triangle], *, adjacency: bool = True) -> NavMesh:
        mesh = NavMesh(triangles, tolerance=self.tolerance)
        return mesh.build_adjacency() if adjacency else mesh

    def mesh_from_arrays(self, vertices, triangles, *, adjacency: bool = True) -> NavMesh:
        return NavMesh.from_arrays(vertices, triangles, tolerance=self.tolerance, adjacency=adjacency)

    def find_path(
        self,
        mesh: NavMesh,
        start,
        goals: Sequence,
        *,
        start_triangle: int | None = None,
        on_explored: ExploredCallback | None = None,
    ) -> Path | None:
        start = _as_vector(start)
        goals = [_as_vector(g) for g in goals]
        if start_triangle is None:
            start_triangle = self._lookup_start(mesh, start)

        hooks = self.hooks
        if on_explored is not None:
            hooks = FanoutHooks(hooks, CallbackHooks(on_explored))
        return SearchDriver(mesh.freeze(), hooks=hooks).find_path(start, start_triangle, goals)

    def _lookup_start(self, mesh: NavMesh, start: Vector) -> int:
        lookup = self.model.search.start_lookup
        if lookup == "given":
            raise ValueError("start_triangle is required when search.start_lookup is 'given'")
        found = mesh.locate(start) if lookup == "contain" else mesh.nearest(start)
        if found is None:
            raise ValueError(f"no start triangle for {start!r} (start_lookup={lookup!r})")
        return found


def make_recorder(cfg: RecorderModel) -> Recorder | None:
    if cfg.kind == "memory":
        return Recorder(MemorySink())
    if cfg.kind == "jsonl":
        return Recorder(JsonlSink())
    return None


def build(cfg: PathfinderModel | Mapping, *, use_logging: bool = True) -> Pathfinder:
    # 0) Validate config
    model = cfg if isinstance(cfg, PathfinderModel) else PathfinderModel.model_validate(cfg)

    # 1) Records for analytics
    recorder = make_recorder(model.recorder)

    # 2) Hooks
    hooks = (
        SearchLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
        if use_logging
        else NoopHooks()
    )
    return Pathfinder(model, hooks, recorder)
