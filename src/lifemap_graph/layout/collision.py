"""Axis-aligned rectangle collision for differently sized nodes.

Overlapping pairs are pushed apart along the axis with the smaller overlap,
which is the cheapest way to separate two boxes. During the simulation the
push is a velocity impulse scaled by alpha; after the run ``settle_overlaps``
removes whatever overlap is left by moving positions directly, falling
back to a sideways sweep when crowded bands stop improving.
"""

from __future__ import annotations

__all__ = ["RectangleCollision", "find_overlaps", "settle_overlaps", "Overlap"]

import logging
import math
from dataclasses import dataclass
from typing import Iterator

from lifemap_graph.layout.constants import (
    COLLISION_PADDING,
    EPSILON,
    OVERLAP_TOLERANCE,
    SETTLE_MAX_PASSES,
    SETTLE_STALL_PASSES,
)
from lifemap_graph.layout.forces import SimulationNode
from lifemap_graph.layout.quadtree import QuadTree

logger = logging.getLogger(__name__)


@dataclass
class Overlap:
    """Penetration between two padded node boxes."""

    a: SimulationNode
    b: SimulationNode
    x: float
    y: float

    @property
    def depth(self) -> float:
        return min(self.x, self.y)


def _direction(a: SimulationNode, b: SimulationNode, delta: float) -> float:
    """Direction in which ``a`` moves away from ``b`` along one axis.

    ``delta`` is ``b - a`` on that axis. Coincident centres fall back to
    id ordering so the pair never stays stuck.
    """
    if delta > EPSILON:
        return -1.0
    if delta < -EPSILON:
        return 1.0
    return -1.0 if a.id <= b.id else 1.0


def _candidate_pairs(
    nodes: list[SimulationNode], padding: float
) -> Iterator[tuple[SimulationNode, SimulationNode, float, float]]:
    """Yield each overlapping pair once with its (x, y) overlap."""
    if len(nodes) < 2:
        return
    tree = QuadTree.build(range(len(nodes)), lambda i: (nodes[i].x, nodes[i].y))
    max_hw = max(n.width for n in nodes) / 2 + padding / 2
    max_hh = max(n.height for n in nodes) / 2 + padding / 2

    for i, node in enumerate(nodes):
        hw = node.width / 2 + padding / 2
        hh = node.height / 2 + padding / 2
        for j in tree.query(node.x - hw - max_hw, node.y - hh - max_hh,
                            node.x + hw + max_hw, node.y + hh + max_hh):
            if j <= i:
                continue
            other = nodes[j]
            ohw = other.width / 2 + padding / 2
            ohh = other.height / 2 + padding / 2
            overlap_x = hw + ohw - abs(other.x - node.x)
            overlap_y = hh + ohh - abs(other.y - node.y)
            if overlap_x > 0 and overlap_y > 0:
                yield node, other, overlap_x, overlap_y


class RectangleCollision:
    """Collision force for rectangular nodes, rebuilt on a quadtree per tick."""

    def __init__(self, padding: float = COLLISION_PADDING) -> None:
        self.padding = padding

    def apply(self, nodes: list[SimulationNode], alpha: float) -> None:
        for node, other, overlap_x, overlap_y in _candidate_pairs(nodes, self.padding):
            if node.pinned and other.pinned:
                continue
            if overlap_x < overlap_y:
                direction = _direction(node, other, other.x - node.x)
                push = overlap_x * 0.5 * alpha
                node_share, other_share = _shares(node, other, push)
                node.vx += direction * node_share
                other.vx -= direction * other_share
            else:
                direction = _direction(node, other, other.y - node.y)
                push = overlap_y * 0.5 * alpha
                node_share, other_share = _shares(node, other, push)
                node.vy += direction * node_share
                other.vy -= direction * other_share


def _shares(a: SimulationNode, b: SimulationNode, push: float) -> tuple[float, float]:
    # A pinned node hands its half of the correction to its partner
    if a.pinned:
        return 0.0, 2 * push
    if b.pinned:
        return 2 * push, 0.0
    return push, push


def find_overlaps(
    nodes: list[SimulationNode],
    padding: float = COLLISION_PADDING,
    tolerance: float = OVERLAP_TOLERANCE,
) -> list[Overlap]:
    """Return pairs whose padded boxes overlap by more than ``tolerance``."""
    return [
        Overlap(a, b, ox, oy)
        for a, b, ox, oy in _candidate_pairs(nodes, padding)
        if min(ox, oy) > tolerance
    ]


def settle_overlaps(
    nodes: list[SimulationNode],
    padding: float = COLLISION_PADDING,
    max_passes: int = SETTLE_MAX_PASSES,
    tolerance: float = OVERLAP_TOLERANCE,
) -> int:
    """Separate remaining overlaps by moving positions directly.

    Pairwise passes push each overlapping pair apart along its smaller
    overlap. Once the total overlap stops shrinking (crowded level bands
    push nodes back and forth) or the passes run out, a sideways sweep
    places every free node clear of the nodes placed before it. Pinned
    nodes do not move. Returns the number of overlaps left, which can only
    be pairs of two pinned nodes.
    """
    best = math.inf
    stalled = 0
    for _ in range(max_passes):
        remaining = _movable(find_overlaps(nodes, padding, tolerance))
        if not remaining:
            return 0
        total = sum(o.depth for o in remaining)
        if total < best - tolerance:
            best, stalled = total, 0
        else:
            stalled += 1
            if stalled >= SETTLE_STALL_PASSES:
                break
        for o in remaining:
            # Recompute: earlier moves in this pass may have changed the pair
            a, b = o.a, o.b
            ox = (a.width + b.width) / 2 + padding - abs(b.x - a.x)
            oy = (a.height + b.height) / 2 + padding - abs(b.y - a.y)
            if ox <= tolerance or oy <= tolerance:
                continue
            if ox < oy:
                direction = _direction(a, b, b.x - a.x)
                a_move, b_move = _shares(a, b, ox / 2 + EPSILON)
                a.x += direction * a_move
                b.x -= direction * b_move
            else:
                direction = _direction(a, b, b.y - a.y)
                a_move, b_move = _shares(a, b, oy / 2 + EPSILON)
                a.y += direction * a_move
                b.y -= direction * b_move

    if _movable(find_overlaps(nodes, padding, tolerance)):
        logger.debug("Pairwise settling stalled; sweeping free nodes sideways")
        _sweep(nodes, padding, tolerance)
    left = len(find_overlaps(nodes, padding, tolerance))
    if left:
        logger.warning("%d overlaps between pinned nodes cannot be resolved", left)
    return left


def _movable(overlaps: list[Overlap]) -> list[Overlap]:
    return [o for o in overlaps if not (o.a.pinned and o.b.pinned)]


def _sweep(nodes: list[SimulationNode], padding: float, tolerance: float) -> None:
    """Slide free nodes along x until none overlaps a node placed before it.

    Pinned nodes are placed first; free nodes follow top to bottom, left to
    right. A node already clear of everything placed keeps its position.
    """
    placed = [n for n in nodes if n.pinned]
    free = sorted((n for n in nodes if not n.pinned), key=lambda n: (n.y, n.x, n.id))
    for node in free:
        blocked: list[tuple[float, float]] = []
        for other in placed:
            reach_y = (node.height + other.height) / 2 + padding - tolerance
            if abs(other.y - node.y) >= reach_y:
                continue
            reach_x = (node.width + other.width) / 2 + padding
            blocked.append((other.x - reach_x, other.x + reach_x))
        node.x = _nearest_free(node.x, blocked)
        node.vx = 0.0
        placed.append(node)


def _nearest_free(x: float, blocked: list[tuple[float, float]]) -> float:
    """Closest value to ``x`` outside every open interval in ``blocked``."""
    merged: list[list[float]] = []
    for lo, hi in sorted(blocked):
        if merged and lo < merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], hi)
        else:
            merged.append([lo, hi])
    for lo, hi in merged:
        if lo < x < hi:
            return lo if x - lo <= hi - x else hi
    return x
