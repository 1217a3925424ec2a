"""Expansion set: which nodes the user has opened.

Expanding adds a single id. Collapsing removes the id together with every
expanded descendant, so re-opening a parent later shows its children
collapsed again.
"""

from __future__ import annotations

__all__ = ["ExpansionSet", "hierarchy_graph", "descendant_ids"]

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

import networkx as nx

from lifemap_graph.parser.model import Node


def hierarchy_graph(nodes: Iterable[Node] | Mapping[str, Node]) -> nx.DiGraph:
    """Directed parent -> child graph over existing nodes."""
    values = nodes.values() if isinstance(nodes, Mapping) else nodes
    by_id = {n.id: n for n in values}
    G = nx.DiGraph()
    G.add_nodes_from(by_id)
    for nid, node in by_id.items():
        for pid in node.parent_ids:
            if pid in by_id:
                G.add_edge(pid, nid)
    return G


def descendant_ids(
    nodes: Iterable[Node] | Mapping[str, Node],
    node_id: str,
) -> set[str]:
    """All ids transitively reachable from ``node_id`` through parent links."""
    G = hierarchy_graph(nodes)
    if node_id not in G:
        return set()
    return set(nx.descendants(G, node_id))


@dataclass(frozen=True)
class ExpansionSet:
    """Immutable set of expanded node ids; operations return a new set."""

    ids: frozenset[str] = frozenset()

    @classmethod
    def from_iterable(cls, ids: Iterable[str]) -> ExpansionSet:
        return cls(frozenset(ids))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.ids))

    def __len__(self) -> int:
        return len(self.ids)

    def expand(self, node_id: str) -> ExpansionSet:
        return ExpansionSet(self.ids | {node_id})

    def collapse(
        self,
        node_id: str,
        nodes: Iterable[Node] | Mapping[str, Node],
    ) -> ExpansionSet:
        """Remove ``node_id`` and all of its descendants."""
        removed = descendant_ids(nodes, node_id) | {node_id}
        return ExpansionSet(self.ids - removed)

    def toggle(
        self,
        node_id: str,
        nodes: Iterable[Node] | Mapping[str, Node],
    ) -> ExpansionSet:
        if node_id in self.ids:
            return self.collapse(node_id, nodes)
        return self.expand(node_id)
