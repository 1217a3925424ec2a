"""Forces acting on simulation nodes.

Each force exposes ``apply(nodes, alpha)`` and adds to node velocities
(the centring force translates positions instead). Pinned nodes never
receive velocity from these forces, though they still act on others.
"""

from __future__ import annotations

__all__ = [
    "SimulationNode",
    "ManyBodyForce",
    "LinkForce",
    "LevelForce",
    "CenterForce",
]

import math
from dataclasses import dataclass

from lifemap_graph.layout.constants import (
    DISTANCE_MAX,
    DISTANCE_MIN,
    EPSILON,
    LEVEL_STRENGTH,
    LINK_DISTANCE,
    LINK_STRENGTH,
    MID_LEVEL,
    NODE_REPULSION,
    TIE_BREAK_NUDGE,
)
from lifemap_graph.layout.quadtree import QuadTree
from lifemap_graph.parser.model import Edge, Node


@dataclass(eq=False)
class SimulationNode:
    """Live simulation state for one node during a single run."""

    node: Node
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None
    width: float = 0.0
    height: float = 0.0

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def level(self) -> int:
        return self.node.level

    @property
    def pinned(self) -> bool:
        return self.fx is not None and self.fy is not None


class ManyBodyForce:
    """Inverse-square repulsion between node pairs within ``distance_max``."""

    def __init__(
        self,
        strength: float = NODE_REPULSION,
        distance_min: float = DISTANCE_MIN,
        distance_max: float = DISTANCE_MAX,
    ) -> None:
        self.strength = strength
        self.distance_min2 = max(distance_min, EPSILON) ** 2
        self.distance_max = distance_max
        self.distance_max2 = distance_max * distance_max

    def apply(self, nodes: list[SimulationNode], alpha: float) -> None:
        if len(nodes) < 2 or self.strength == 0:
            return
        tree = QuadTree.build(nodes, lambda n: (n.x, n.y))
        reach = self.distance_max
        for node in nodes:
            if node.pinned:
                continue
            for other in tree.query(node.x - reach, node.y - reach,
                                    node.x + reach, node.y + reach):
                if other is node:
                    continue
                dx = other.x - node.x
                dy = other.y - node.y
                l2 = dx * dx + dy * dy
                if l2 >= self.distance_max2 or l2 == 0.0:
                    continue
                # Clamp so near-coincident nodes get a bounded push
                l2 = max(l2, self.distance_min2)
                w = self.strength * alpha / l2
                node.vx += dx * w
                node.vy += dy * w


class LinkForce:
    """Spring attraction along edges.

    Each edge pulls its endpoints toward ``distance`` apart; the correction
    is split by node degree so hubs move less than leaves.
    """

    def __init__(
        self,
        edges: list[Edge],
        nodes: list[SimulationNode],
        distance: float = LINK_DISTANCE,
        strength: float = LINK_STRENGTH,
    ) -> None:
        self.distance = distance
        self.strength = strength
        by_id = {n.id: n for n in nodes}
        degree: dict[str, int] = {}
        self.links: list[tuple[SimulationNode, SimulationNode, float]] = []
        resolved = [
            (by_id[e.source], by_id[e.target])
            for e in edges
            if e.source in by_id and e.target in by_id and e.source != e.target
        ]
        for source, target in resolved:
            degree[source.id] = degree.get(source.id, 0) + 1
            degree[target.id] = degree.get(target.id, 0) + 1
        for source, target in resolved:
            bias = degree[source.id] / (degree[source.id] + degree[target.id])
            self.links.append((source, target, bias))

    def __len__(self) -> int:
        return len(self.links)

    def apply(self, nodes: list[SimulationNode], alpha: float) -> None:
        for source, target, bias in self.links:
            dx = target.x + target.vx - source.x - source.vx
            dy = target.y + target.vy - source.y - source.vy
            length = math.sqrt(dx * dx + dy * dy)
            if length < EPSILON:
                dx = TIE_BREAK_NUDGE if source.id < target.id else -TIE_BREAK_NUDGE
                dy = 0.0
                length = TIE_BREAK_NUDGE
            k = (length - self.distance) / length * alpha * self.strength
            dx *= k
            dy *= k
            if not target.pinned:
                target.vx -= dx * bias
                target.vy -= dy * bias
            if not source.pinned:
                source.vx += dx * (1 - bias)
                source.vy += dy * (1 - bias)


class LevelForce:
    """Soft pull of each node toward the vertical band of its level."""

    def __init__(
        self,
        center_y: float,
        separation: float,
        strength: float = LEVEL_STRENGTH,
        mid_level: float = MID_LEVEL,
    ) -> None:
        self.center_y = center_y
        self.separation = separation
        self.strength = strength
        self.mid_level = mid_level

    def target_y(self, level: int) -> float:
        return self.center_y + (level - self.mid_level) * self.separation

    def apply(self, nodes: list[SimulationNode], alpha: float) -> None:
        for node in nodes:
            if node.pinned:
                continue
            node.vy += (self.target_y(node.level) - node.y) * alpha * self.strength


class CenterForce:
    """Translate free nodes so their centroid sits on (center_x, center_y)."""

    def __init__(self, center_x: float, center_y: float) -> None:
        self.center_x = center_x
        self.center_y = center_y

    def apply(self, nodes: list[SimulationNode], alpha: float) -> None:
        free = [n for n in nodes if not n.pinned]
        if not free:
            return
        sx = sum(n.x for n in free) / len(free) - self.center_x
        sy = sum(n.y for n in free) / len(free) - self.center_y
        for node in free:
            node.x -= sx
            node.y -= sy
