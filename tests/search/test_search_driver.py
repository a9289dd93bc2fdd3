# tests/search/test_search_driver.py
import math

import pytest

from tpa_star.domain.entities.geometry import Edge, Vector
from tpa_star.domain.entities.triangle import Triangle
from tpa_star.domain.errors import FunnelError
from tpa_star.domain.mesh import NavMesh
from tpa_star.search.driver import SearchDriver, find_path
from tpa_star.search.hooks import CallbackHooks, FanoutHooks, NoopHooks

V = Vector


def mesh_of(*tris):
    return NavMesh(tris, tolerance=0.001).build_adjacency().freeze()


@pytest.fixture
def corner_strip():
    # t0..t3 wind around the corner (10, 12.5)
    return mesh_of(
        Triangle(V(10.0, 7.5), V(10.0, 12.5), V(5.0, 10.0)),
        Triangle(V(5.0, 10.0), V(10.0, 12.5), V(5.0, 15.0)),
        Triangle(V(10.0, 12.5), V(12.5, 15.0), V(5.0, 15.0)),
        Triangle(V(15.0, 12.5), V(12.5, 15.0), V(10.0, 12.5)),
    )


A, B, C = V(0.0, 0.0), V(1.0, 0.0), V(3.0, 0.0)
DP, DN, EP, EN, F = V(2.0, 1.0), V(2.0, -1.0), V(2.0, 2.0), V(2.0, -2.0), V(4.0, 0.0)


@pytest.fixture
def ring():
    # a diamond with a diamond-shaped hole between b, dp, c and dn
    return mesh_of(
        Triangle(A, B, DP),
        Triangle(A, B, DN),
        Triangle(A, DP, EP),
        Triangle(A, DN, EN),
        Triangle(EP, DP, C),
        Triangle(EN, DN, C),
        Triangle(EP, F, C),
        Triangle(EN, F, C),
    )


class Trace(NoopHooks):
    def __init__(self):
        self.explored, self.pruned, self.warnings, self.errors, self.finished = [], [], [], [], []

    def triangle_explored(self, triangle, evaluation):
        self.explored.append((triangle, evaluation))

    def candidate_pruned(self, triangle, **kw):
        self.pruned.append(triangle)

    def warning(self, *, reason, **kw):
        self.warnings.append(reason)

    def error(self, *, reason, exc, **kw):
        self.errors.append((reason, exc, kw))

    def search_end(self, **kw):
        self.finished.append(kw)


# ------------------ STRAIGHT LINES ------------------


def test_same_triangle_path_is_a_straight_line():
    mesh = mesh_of(Triangle(V(5.0, 5.0), V(5.0, 10.0), V(10.0, 7.5)))
    path = find_path(mesh, V(5.5, 7.5), 0, [V(7.0, 7.5)])
    assert path.points == (V(5.5, 7.5), V(7.0, 7.5))
    assert path.length == pytest.approx(1.5)


def test_straight_line_across_one_edge():
    mesh = mesh_of(
        Triangle(V(10.0, 7.5), V(5.0, 10.0), V(5.0, 5.0)),
        Triangle(V(10.0, 7.5), V(10.0, 12.5), V(5.0, 10.0)),
    )
    path = find_path(mesh, V(7.5, 7.5), 0, [V(7.5, 10.0)])
    assert len(path) == 2
    assert path.length == pytest.approx(2.5)


def test_start_on_a_shared_vertex_goes_straight_to_the_goal():
    a, b, c = V(0.0, 0.0), V(1.0, 0.0), V(2.0, 0.0)
    d, e, f = V(0.0, 1.0), V(1.0, 1.0), V(2.0, 1.0)
    mesh = mesh_of(Triangle(a, b, e), Triangle(a, e, d), Triangle(b, c, f), Triangle(b, f, e))
    goal = V(1.8, 0.9)

    path = find_path(mesh, b, 0, [goal])
    assert path.points == (b, goal)
    assert path.length == pytest.approx(math.hypot(0.8, 0.9))

    path = find_path(mesh, e, 1, [V(1.2, 0.1)])
    assert path.points == (e, V(1.2, 0.1))


# ------------------ CORNERS & GOALS ------------------


def test_path_bends_around_the_corner(corner_strip):
    path = find_path(corner_strip, V(9.0, 11.5), 0, [V(12.0, 13.5)])
    assert len(path) == 3
    assert path.points[1] == V(10.0, 12.5)
    assert path.length == pytest.approx(math.sqrt(2) + math.sqrt(5), abs=1e-4)


def test_nearer_goal_straight_ahead_wins(corner_strip):
    path = find_path(corner_strip, V(9.0, 11.5), 0, [V(12.0, 13.5), V(9.0, 14.5)])
    assert path.points == (V(9.0, 11.5), V(9.0, 14.5))
    assert path.length == pytest.approx(3.0)


def test_closer_goal_in_the_neighbour_beats_a_goal_in_the_start_triangle():
    mesh = mesh_of(
        Triangle(V(0.0, 0.0), V(1.0, 0.0), V(0.0, 1.0)),
        Triangle(V(0.0, 0.0), V(-1.0, 0.0), V(0.0, 1.0)),
    )
    path = find_path(mesh, V(0.1, 0.1), 0, [V(0.5, 0.1), V(-0.1, 0.1)])
    assert path.end == V(-0.1, 0.1)
    assert path.length == pytest.approx(0.2)


def test_three_neighbour_triangle():
    a, b, c = V(-1.0, 0.0), V(1.0, 0.0), V(0.0, 1.0)
    d, e, f = V(-1.0, 2.0), V(1.0, 2.0), V(0.0, -2.0)
    mesh = mesh_of(Triangle(a, b, c), Triangle(d, a, c), Triangle(b, c, e), Triangle(a, b, f))
    assert sorted(mesh.neighbors(0)) == [1, 2, 3]

    path = find_path(mesh, V(0.0, 0.5), 0, [V(-1.0, 1.0), V(0.8, 0.8)])
    assert path.points == (V(0.0, 0.5), V(0.8, 0.8))

    path = find_path(mesh, V(0.8, 1.8), 2, [d])
    assert path.points == (V(0.8, 1.8), c, d)


# ------------------ HOLES ------------------


def test_unreachable_goal_gives_no_path(ring):
    assert find_path(ring, V(1.0, 0.5), 0, [V(2.0, 0.0)]) is None


def test_no_path_is_distinct_from_an_empty_path(ring):
    start = V(0.5, 0.2)
    path = find_path(ring, start, 0, [start])
    assert path is not None
    assert path.length == 0.0


def test_shortest_of_several_goals_around_a_hole(ring):
    start, far, near = V(0.5, 0.0), V(3.5, 0.0), V(3.4, 0.1)
    path = find_path(ring, start, 0, [far, near])
    assert path.points == (start, DP, near)


def test_either_side_of_a_symmetric_hole(ring):
    start, goal = V(0.5, 0.0), V(3.5, 0.0)
    path = find_path(ring, start, 0, [goal])
    assert len(path) == 3
    assert path.points[1] in (DP, DN)
    assert path.length == pytest.approx(2 * math.sqrt(1.5**2 + 1))


# ------------------ DRIVER CONTRACT ------------------


def test_requery_gives_the_same_path(corner_strip):
    driver = SearchDriver(corner_strip)
    first = driver.find_path(V(9.0, 11.5), 0, [V(12.0, 13.5)])
    second = driver.find_path(V(9.0, 11.5), 0, [V(12.0, 13.5)])
    assert first == second


def test_empty_goals_raise(corner_strip):
    with pytest.raises(ValueError, match="goal"):
        find_path(corner_strip, V(9.0, 11.5), 0, [])


def test_start_outside_its_triangle_is_reported(corner_strip):
    trace = Trace()
    path = find_path(corner_strip, V(9.0, 11.5), 1, [V(6.0, 14.0)], hooks=trace)
    assert trace.warnings == ["start_outside_triangle"]
    assert path is not None


def test_every_explored_triangle_is_reported(corner_strip):
    seen = []
    path = find_path(
        corner_strip,
        V(9.0, 11.5),
        0,
        [V(12.0, 13.5)],
        hooks=CallbackHooks(lambda t, ev: seen.append((t, ev))),
    )
    assert path is not None
    assert [t for t, _ in seen] == [0, 1, 2, 3]
    assert seen[0][1].estimated_minimal_overall_cost == 0.0
    for _, ev in seen[1:]:
        assert ev.shortest_possible_path_length <= ev.longest_possible_path_length + 1e-12
        assert ev.estimated_minimal_overall_cost <= path.length + 1e-9


def test_search_end_summary(ring):
    trace = Trace()
    find_path(ring, V(1.0, 0.5), 0, [V(2.0, 0.0)], hooks=trace)
    (summary,) = trace.finished
    assert summary["found"] is False
    assert summary["length"] is None
    assert summary["expanded"] > 0


def test_find_path_freezes_the_mesh():
    mesh = NavMesh([Triangle(V(0.0, 0.0), V(1.0, 0.0), V(0.0, 1.0))])
    find_path(mesh, V(0.1, 0.1), 0, [V(0.2, 0.2)])
    assert mesh.frozen


class _CrossedLinks:
    """Three triangles in a row whose second portal does not touch the first."""

    tolerance = 0.001

    def neighbors(self, index):
        return {0: (1,), 1: (0, 2), 2: (1,)}[index]

    def common_edge(self, i, j):
        if {i, j} == {0, 1}:
            return Edge(V(1.0, -1.0), V(1.0, 1.0))
        return Edge(V(5.0, 5.0), V(6.0, 6.0))

    def contains_point(self, index, p):
        return False


def test_broken_portal_chain_is_reported_and_raised():
    trace, other = Trace(), Trace()
    with pytest.raises(FunnelError):
        find_path(_CrossedLinks(), V(0.0, 0.0), 0, [V(10.0, 0.0)], hooks=FanoutHooks(trace, other))
    assert len(other.errors) == 1
    ((reason, exc, kw),) = trace.errors
    assert reason == "step_failed"
    assert isinstance(exc, FunnelError)
    assert kw == {"triangle": 1, "to": 2}
    assert trace.finished == []
