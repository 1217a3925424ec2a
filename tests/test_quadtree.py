"""Tests for the spatial index."""

import pytest

from lifemap_graph.layout.quadtree import QuadTree


def _points():
    return [("a", (0.0, 0.0)), ("b", (10.0, 10.0)), ("c", (50.0, 5.0)),
            ("d", (-30.0, 40.0)), ("e", (100.0, 100.0))]


def test_build_and_len():
    tree = QuadTree.build(_points(), lambda p: p[1])
    assert len(tree) == 5


def test_query_rectangle_inclusive():
    tree = QuadTree.build(_points(), lambda p: p[1])
    found = {p[0] for p in tree.query(0, 0, 10, 10)}
    assert found == {"a", "b"}


def test_query_matches_brute_force():
    """Many points: every query agrees with a linear scan."""
    pts = [(i, ((i * 37) % 101 - 50.0, (i * 53) % 97 - 48.0)) for i in range(300)]
    tree = QuadTree.build(pts, lambda p: p[1])
    for x1, y1, x2, y2 in [(-10, -10, 10, 10), (-50, -50, 0, 0), (20, -48, 50, 48)]:
        expected = {i for i, (x, y) in pts if x1 <= x <= x2 and y1 <= y <= y2}
        assert {p[0] for p in tree.query(x1, y1, x2, y2)} == expected


def test_coincident_points_do_not_recurse_forever():
    pts = [(i, (5.0, 5.0)) for i in range(200)]
    tree = QuadTree.build(pts, lambda p: p[1])
    assert len(tree.query(5, 5, 5, 5)) == 200


def test_empty_build():
    tree = QuadTree.build([], lambda p: p)
    assert len(tree) == 0
    assert tree.query(-1e9, -1e9, 1e9, 1e9) == []


def test_insert_outside_bounds_rejected():
    tree = QuadTree(0, 0, 10, 10)
    with pytest.raises(ValueError):
        tree.insert("x", 50, 50)


def test_split_cells_route_points_to_quadrants():
    """Points on the split lines land in exactly one child cell."""
    pts = [(i, (float(i % 4) * 5.0, float(i // 4) * 5.0)) for i in range(16)]
    tree = QuadTree.build(pts, lambda p: p[1])
    assert len(tree) == 16
    assert {p[0] for p in tree.query(-100, -100, 100, 100)} == set(range(16))
    assert {p[0] for p in tree.query(7.5, 7.5, 7.5, 7.5)} == set()
    assert {p[0] for p in tree.query(5, 5, 5, 5)} == {5}
