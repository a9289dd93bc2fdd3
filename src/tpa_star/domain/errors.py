# domain/errors.py


class GeometryError(ValueError):
    """Degenerate geometry: coinciding edge endpoints, collapsed triangles."""


class AdjacencyError(ValueError):
    """Malformed triangle adjacency (non-adjacent pair, too many neighbours, frozen mesh)."""


class FunnelError(ValueError):
    """Portal edge that does not continue the current funnel."""
