"""Expand/collapse state and the visible-node resolver."""

from lifemap_graph.visibility.expansion import ExpansionSet, descendant_ids, hierarchy_graph
from lifemap_graph.visibility.resolver import find_orphans, resolve_visible, visible_graph

__all__ = [
    "ExpansionSet",
    "descendant_ids",
    "find_orphans",
    "hierarchy_graph",
    "resolve_visible",
    "visible_graph",
]
