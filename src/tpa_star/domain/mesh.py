# domain/mesh.py
from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from tpa_star.domain.entities.geometry import TOLERANCE, Edge, Vector
from tpa_star.domain.entities.triangle import Triangle
from tpa_star.domain.errors import AdjacencyError, GeometryError

MAX_NEIGHBORS = 3


def adjacency_from_indices(triangles: np.ndarray) -> np.ndarray:
    """
    Neighbour table of an indexed triangle mesh.

    triangles: (M, 3) vertex indices.
    Returns (M, 3) int array, row t holds the triangle across side k of t
    (side 0 = vertices (0, 1), 1 = (1, 2), 2 = (2, 0)), or -1 on the boundary.
    """
    m = len(triangles)
    neighbors = np.full((m, 3), -1, dtype=np.int64)
    side_owner: dict[tuple[int, int], tuple[int, int]] = {}

    for t in range(m):
        row = triangles[t]
        for k in range(3):
            v0, v1 = int(row[k]), int(row[(k + 1) % 3])
            key = (min(v0, v1), max(v0, v1))
            if key not in side_owner:
                side_owner[key] = (t, k)
                continue
            other, other_k = side_owner[key]
            if neighbors[other, other_k] != -1:
                raise AdjacencyError(f"side {key} is shared by more than two triangles")
            neighbors[t, k] = other
            neighbors[other, other_k] = t
    return neighbors


class NavMesh:
    """
    Triangle arena: triangles are addressed by index, adjacency is a list of
    neighbour indices per triangle. The common edge of each adjacent pair is built
    once and handed out for both directions, so it can key per-edge tables exactly.
    """

    def __init__(self, triangles: Iterable[Triangle], *, tolerance: float = TOLERANCE):
        if tolerance <= 0:
            raise ValueError(f"tolerance must be > 0, got {tolerance}")
        self._triangles: tuple[Triangle, ...] = tuple(triangles)
        for i, tri in enumerate(self._triangles):
            a, b, c = tri.vertices
            if a.is_close(b, tolerance) or a.is_close(c, tolerance) or b.is_close(c, tolerance):
                raise GeometryError(f"triangle {i} has vertices closer than tolerance {tolerance}: {tri!r}")
        self.tolerance = tolerance
        self._neighbors: list[tuple[int, ...]] = [() for _ in self._triangles]
        self._edges: dict[tuple[int, int], Edge] = {}
        self._frozen = False

    @classmethod
    def from_arrays(
        cls,
        vertices,
        triangles,
        *,
        tolerance: float = TOLERANCE,
        adjacency: bool = True,
    ) -> NavMesh:
        verts = np.asarray(vertices, dtype=float)
        tris = np.asarray(triangles)
        if verts.ndim != 2 or verts.shape[1] != 2:
            raise ValueError(f"vertices must have shape (N, 2), got {verts.shape}")
        if tris.ndim != 2 or tris.shape[1] != 3:
            raise ValueError(f"triangles must have shape (M, 3), got {tris.shape}")
        if tris.size and not np.issubdtype(tris.dtype, np.integer):
            raise ValueError(f"triangle indices must be integers, got dtype {tris.dtype}")
        if tris.size and (tris.min() < 0 or tris.max() >= len(verts)):
            raise ValueError(f"triangle indices out of range [0, {len(verts)})")

        points = [Vector(float(x), float(y)) for x, y in verts]
        mesh = cls(
            (Triangle(points[i], points[j], points[k]) for i, j, k in tris.tolist()),
            tolerance=tolerance,
        )
        if adjacency and tris.size:
            table = adjacency_from_indices(tris)
            for t, row in enumerate(table.tolist()):
                mesh.set_neighbors(t, [n for n in row if n >= 0])
        return mesh

    # ---------------- Arena ------------------------

    def __len__(self) -> int:
        return len(self._triangles)

    def __getitem__(self, index: int) -> Triangle:
        return self._triangles[index]

    @property
    def triangles(self) -> tuple[Triangle, ...]:
        return self._triangles

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> NavMesh:
        self._frozen = True
        return self

    # ---------------- Adjacency ------------------------

    def set_neighbors(self, index: int, neighbors: Iterable[int]) -> None:
        if self._frozen:
            raise AdjacencyError("mesh is frozen, neighbours can no longer change")
        self._check_index(index)
        ns = tuple(dict.fromkeys(int(n) for n in neighbors))
        if len(ns) > MAX_NEIGHBORS:
            raise AdjacencyError(
                f"triangle {index} given {len(ns)} neighbours, at most {MAX_NEIGHBORS} allowed"
            )
        edges = {}
        for n in ns:
            self._check_index(n)
            if n == index:
                raise AdjacencyError(f"triangle {index} cannot neighbour itself")
            key = (min(index, n), max(index, n))
            edges[key] = self._edges.get(key) or self._shared_edge(*key)
        self._neighbors[index] = ns
        self._edges.update(edges)

    def build_adjacency(self) -> NavMesh:
        """Link every pair of triangles that share a side (exact vertex match)."""
        owners: dict[Edge, list[int]] = {}
        for i, tri in enumerate(self._triangles):
            for edge in tri.edges:
                owners.setdefault(edge, []).append(i)

        links: list[list[int]] = [[] for _ in self._triangles]
        for edge, idx in owners.items():
            if len(idx) > 2:
                raise AdjacencyError(f"{edge!r} is shared by {len(idx)} triangles")
            if len(idx) == 2:
                i, j = idx
                links[i].append(j)
                links[j].append(i)

        for i, ns in enumerate(links):
            self.set_neighbors(i, ns)
        return self

    def neighbors(self, index: int) -> tuple[int, ...]:
        return self._neighbors[index]

    def common_edge(self, i: int, j: int) -> Edge:
        if j not in self._neighbors[i]:
            raise AdjacencyError(f"triangles {i} and {j} are not neighbours")
        return self._edges[(min(i, j), max(i, j))]

    # ---------------- Point queries ------------------------

    def contains_point(self, index: int, p: Vector) -> bool:
        return self._triangles[index].contains_point(p, self.tolerance)

    def locate(self, p: Vector) -> int | None:
        for i, tri in enumerate(self._triangles):
            if tri.contains_point(p, self.tolerance):
                return i
        return None

    def nearest(self, p: Vector) -> int | None:
        found = self.locate(p)
        if found is not None or not self._triangles:
            return found
        return min(range(len(self._triangles)), key=lambda i: self._triangles[i].distance_to(p))

    # ---------------- Helpers ------------------------

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._triangles):
            raise AdjacencyError(f"triangle index {index} out of range [0, {len(self._triangles)})")

    def _shared_edge(self, i: int, j: int) -> Edge:
        return self._triangles[i].common_edge(self._triangles[j], self.tolerance)

    def __repr__(self) -> str:
        return f"NavMesh(triangles={len(self._triangles)}, tolerance={self.tolerance:g})"
