"""Shared graph builders for tests."""

from __future__ import annotations

from lifemap_graph.parser.model import (
    Edge,
    GraphSnapshot,
    Node,
    NodeType,
    Point,
    make_node,
)


def node(
    node_type: str,
    node_id: str,
    level: int,
    parents: tuple[str, ...] = (),
    position: tuple[float, float] | None = None,
    fixed: tuple[float, float] | None = None,
    **kwargs,
) -> Node:
    return make_node(
        NodeType(node_type),
        node_id,
        level=level,
        parent_ids=parents,
        position=Point(*position) if position is not None else None,
        fixed_position=Point(*fixed) if fixed is not None else None,
        **kwargs,
    )


def graph_from(nodes: list[Node], root_id: str | None = None) -> GraphSnapshot:
    """Snapshot with one parent -> child edge per parent reference."""
    graph = GraphSnapshot(root_id=root_id)
    for n in nodes:
        graph.add_node(n)
    for n in nodes:
        for pid in n.parent_ids:
            graph.add_edge(Edge(id=f"{pid}->{n.id}", source=pid, target=n.id))
    graph.recount_children()
    return graph


def chain_nodes() -> list[Node]:
    """root(L0) -> A(L1) -> B(L2) -> C(L3)."""
    return [
        node("root", "root", 0),
        node("person", "A", 1, ("root",)),
        node("category", "B", 2, ("A",)),
        node("document", "C", 3, ("B",)),
    ]


def family_graph() -> GraphSnapshot:
    """Two people with categories, subcategories and documents."""
    return graph_from([
        node("root", "family-root", 0, label="Family"),
        node("person", "alice", 1, ("family-root",)),
        node("person", "bob", 1, ("family-root",)),
        node("category", "alice-docs", 2, ("alice",)),
        node("asset", "alice-car", 2, ("alice",)),
        node("category", "bob-docs", 2, ("bob",)),
        node("document", "alice-passport", 3, ("alice-docs",)),
        node("category", "alice-medical", 3, ("alice-docs",)),
        node("document", "alice-xray", 4, ("alice-medical",)),
        node("document", "bob-licence", 3, ("bob-docs",)),
        node("document", "family-will", 5, ("family-root",)),
    ], root_id="family-root")


def star_nodes(count: int, position: tuple[float, float] | None = None) -> list[Node]:
    """A root with ``count`` children spread over levels 1..5.

    With ``position`` every node starts on that one spot.
    """
    nodes = [node("root", "root", 0, position=position)]
    for i in range(count):
        nodes.append(node("document", f"leaf-{i:03d}", 1 + i % 5, ("root",),
                          position=position))
    return nodes
