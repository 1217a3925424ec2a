"""Visible-node resolution.

Which nodes are shown depends only on the full node set and the expansion
set, so ``resolve_visible`` is a pure function:

- levels 0, 1 and 2 are always shown;
- a level 3 node is shown when one of its parents is expanded;
- a level 4 node additionally needs a parent of its immediate parent
  (the grandparent) to be expanded;
- a level 5 node (a document attached at the top) is shown when the root
  is expanded.

Nodes whose parents are all missing are orphans and never shown beyond
level 2.
"""

from __future__ import annotations

__all__ = ["resolve_visible", "visible_graph", "find_orphans"]

from typing import Iterable, Mapping

from lifemap_graph.parser.model import Edge, Node


def _index(nodes: Iterable[Node] | Mapping[str, Node]) -> dict[str, Node]:
    if isinstance(nodes, Mapping):
        return dict(nodes)
    return {n.id: n for n in nodes}


def _default_root(by_id: dict[str, Node]) -> str | None:
    for node in by_id.values():
        if node.level == 0:
            return node.id
    return None


def _is_visible(
    node: Node,
    by_id: dict[str, Node],
    expanded: frozenset[str] | set[str],
    root_id: str | None,
) -> bool:
    if 0 <= node.level <= 2:
        return True
    parents = [p for p in node.parent_ids if p in by_id]
    if not parents:
        return False
    if node.level == 3:
        return any(p in expanded for p in parents)
    if node.level == 4:
        if not any(p in expanded for p in parents):
            return False
        parent = by_id[parents[0]]
        return any(gp in expanded for gp in parent.parent_ids)
    if node.level == 5:
        return root_id is not None and root_id in expanded
    return False


def resolve_visible(
    nodes: Iterable[Node] | Mapping[str, Node],
    expanded: Iterable[str],
    root_id: str | None = None,
) -> frozenset[str]:
    """Return the ids of the nodes currently displayed."""
    by_id = _index(nodes)
    expanded_ids = frozenset(expanded)
    if root_id is None:
        root_id = _default_root(by_id)
    return frozenset(
        nid for nid, node in by_id.items()
        if _is_visible(node, by_id, expanded_ids, root_id)
    )


def visible_graph(
    nodes: Iterable[Node] | Mapping[str, Node],
    edges: Iterable[Edge],
    expanded: Iterable[str],
    root_id: str | None = None,
) -> tuple[list[Node], list[Edge]]:
    """Visible nodes plus the edges whose endpoints are both visible."""
    by_id = _index(nodes)
    visible = resolve_visible(by_id, expanded, root_id)
    shown = [n for nid, n in by_id.items() if nid in visible]
    shown_edges = [e for e in edges if e.source in visible and e.target in visible]
    return shown, shown_edges


def find_orphans(nodes: Iterable[Node] | Mapping[str, Node]) -> list[str]:
    """Ids of non-root nodes with no existing parent."""
    by_id = _index(nodes)
    return [
        nid for nid, node in by_id.items()
        if node.level > 0 and not any(p in by_id for p in node.parent_ids)
    ]
