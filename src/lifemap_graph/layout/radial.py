"""Radial tree placement.

Lays the hierarchy out as a tree around the canvas centre: depth maps to
ring radius, leaves share the full circle in depth-first order, and each
parent sits at the angular midpoint of its first and last child. The gap
between neighbouring leaves is the larger of the usual tree separation
(siblings 1, cousins 2, divided by depth) and the angle needed to fit both
footprints side by side on their ring.

The force engine uses these positions as its starting point when
``initial_layout="radial"``.
"""

from __future__ import annotations

__all__ = ["radial_tree", "radial_positions"]

import logging
import math

import networkx as nx

from lifemap_graph.layout.constants import RADIAL_DEFAULT_RADIUS, RADIAL_MAX_RADIUS
from lifemap_graph.layout.options import LayoutOptions
from lifemap_graph.layout.sizes import node_size
from lifemap_graph.parser.model import MIN_LEVEL, Node, Point
from lifemap_graph.visibility.expansion import hierarchy_graph

logger = logging.getLogger(__name__)


def radial_tree(nodes: list[Node], root_id: str | None = None) -> nx.DiGraph:
    """Spanning tree of the hierarchy, rooted at ``root_id``.

    Each node hangs under the parent through which a breadth-first walk from
    the root first reaches it. Nodes the walk never reaches are hung
    directly under the root. The root id is stored as ``tree.graph["root"]``;
    without a root the tree is empty.
    """
    by_id = {n.id: n for n in nodes}
    if root_id is None:
        root_id = next((n.id for n in nodes if n.level == MIN_LEVEL), None)
    if root_id is None or root_id not in by_id:
        return nx.DiGraph()

    tree = nx.bfs_tree(hierarchy_graph(by_id), root_id)
    detached = [nid for nid in by_id if nid not in tree]
    for nid in detached:
        tree.add_edge(root_id, nid)
    if detached:
        logger.debug("%d nodes unreachable from '%s' placed on the first ring",
                     len(detached), root_id)
    tree.graph["root"] = root_id
    return tree


def radial_positions(
    nodes: list[Node],
    options: LayoutOptions | None = None,
    root_id: str | None = None,
) -> dict[str, Point]:
    """Cartesian radial-tree position for every node, keyed by id.

    Returns an empty mapping when the node set has no root.
    """
    options = options or LayoutOptions()
    tree = radial_tree(nodes, root_id)
    if not tree:
        return {}
    by_id = {n.id: n for n in nodes}
    root = tree.graph["root"]
    cx, cy = options.center_x, options.center_y

    depth = nx.single_source_shortest_path_length(tree, root)
    max_depth = max(depth.values())
    if max_depth == 0:
        return {root: Point(cx, cy)}
    radius = {nid: d / max_depth * RADIAL_MAX_RADIUS for nid, d in depth.items()}
    parent = {child: p for p, child in tree.edges}

    def separation(a: str, b: str) -> float:
        base = (1.0 if parent[a] == parent[b] else 2.0) / depth[a]
        ring = (radius[a] + radius[b]) / 2 or RADIAL_DEFAULT_RADIUS
        wa, _ = node_size(by_id[a])
        wb, _ = node_size(by_id[b])
        return max(base, ((wa + wb) / 2 + options.collision_padding) / ring)

    order = list(nx.dfs_preorder_nodes(tree, root))
    leaves = [nid for nid in order if tree.out_degree(nid) == 0]
    # Gaps include the wrap-around from the last leaf back to the first
    gaps = [separation(a, leaves[(i + 1) % len(leaves)]) for i, a in enumerate(leaves)]
    total = sum(gaps)

    angle: dict[str, float] = {}
    offset = 0.0
    for nid, gap in zip(leaves, gaps):
        angle[nid] = 2 * math.pi * offset / total
        offset += gap
    for nid in reversed(order):
        kids = list(tree.successors(nid))
        if kids:
            angle[nid] = (angle[kids[0]] + angle[kids[-1]]) / 2

    positions = {root: Point(cx, cy)}
    for nid in order:
        if nid == root:
            continue
        # Angle zero points up
        theta = angle[nid] - math.pi / 2
        positions[nid] = Point(cx + radius[nid] * math.cos(theta),
                               cy + radius[nid] * math.sin(theta))
    return positions
