"""Tests for the graph validator."""

from graph_builders import family_graph, graph_from, node

from lifemap_graph.parser.model import Edge
from lifemap_graph.validate import (
    Severity,
    check_cycles,
    check_edge_endpoints,
    check_levels,
    check_overlaps,
    check_parents,
    check_root,
    validate_graph,
)


def test_family_graph_is_clean():
    assert validate_graph(family_graph()) == []


def test_missing_root():
    graph = graph_from([node("person", "p", 1)])
    violations = check_root(graph)
    assert [v.severity for v in violations] == [Severity.ERROR]


def test_multiple_roots():
    graph = graph_from([node("root", "a", 0), node("root", "b", 0)])
    violations = check_root(graph)
    assert len(violations) == 1
    assert "a, b" in violations[0].message


def test_designated_root_must_be_level_zero():
    graph = graph_from([node("root", "r", 0), node("person", "p", 1, ("r",))],
                       root_id="p")
    violations = check_root(graph)
    assert violations[0].context == {"root": "p"}


def test_empty_graph_has_no_root_error():
    assert check_root(graph_from([])) == []


def test_level_out_of_range():
    graph = graph_from([node("root", "r", 0), node("document", "d", 7, ("r",))])
    violations = check_levels(graph)
    assert [v.severity for v in violations] == [Severity.ERROR]


def test_level_decreasing_is_warning():
    graph = graph_from([
        node("root", "r", 0),
        node("category", "c", 3, ("r",)),
        node("document", "d", 2, ("c",)),
    ])
    violations = check_levels(graph)
    assert len(violations) == 1
    assert violations[0].severity is Severity.WARNING
    assert violations[0].context == {"parent": "c", "child": "d"}


def test_parents():
    graph = graph_from([
        node("root", "r", 0),
        node("person", "lonely", 1),
        node("document", "orphan", 3, ("gone",)),
        node("document", "half", 3, ("r", "gone")),
    ])
    by_node = {v.context["node"]: v for v in check_parents(graph)}
    assert set(by_node) == {"lonely", "orphan", "half"}
    assert "orphaned" in by_node["orphan"].message
    assert all(v.severity is Severity.WARNING for v in by_node.values())


def test_edge_endpoints():
    graph = graph_from([node("root", "r", 0)])
    graph.add_edge(Edge("e", "r", "ghost"))
    violations = check_edge_endpoints(graph)
    assert len(violations) == 1
    assert violations[0].context == {"edge": "e", "target": "ghost"}


def test_cycles():
    graph = graph_from([
        node("root", "r", 0),
        node("category", "a", 2, ("b",)),
        node("category", "b", 2, ("a",)),
    ])
    violations = check_cycles(graph)
    assert len(violations) == 1
    assert violations[0].severity is Severity.ERROR
    assert sorted(violations[0].context["cycle"]) == ["a", "b"]


def test_overlaps():
    nodes = [
        node("document", "a", 3, position=(0.0, 0.0)),
        node("document", "b", 3, position=(50.0, 0.0)),
        node("document", "c", 3, position=(500.0, 0.0)),
        node("document", "unplaced", 3),
    ]
    violations = check_overlaps(nodes, padding=20)
    assert len(violations) == 1
    assert violations[0].context["a"] == "a"
    assert violations[0].context["b"] == "b"
    # 80 + 20 - 50
    assert violations[0].context["depth"] == 50.0


def test_violation_str():
    graph = graph_from([node("person", "p", 1)])
    assert str(check_root(graph)[0]).startswith("[error] root:")
