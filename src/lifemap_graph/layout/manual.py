"""Manual position overrides.

When the user finishes dragging a node it is pinned where it was dropped.
Pinned nodes are skipped by the movement forces but stay in collision
resolution as immovable obstacles.
"""

from __future__ import annotations

__all__ = ["ManualPositions"]

import logging
from dataclasses import replace
from typing import Iterable

from lifemap_graph.parser.model import Node, Point

logger = logging.getLogger(__name__)


class ManualPositions:
    """Table of user-pinned node positions."""

    def __init__(self) -> None:
        self._pins: dict[str, Point] = {}
        self._dragging: set[str] = set()

    def __len__(self) -> int:
        return len(self._pins)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._pins

    @property
    def pinned_ids(self) -> frozenset[str]:
        return frozenset(self._pins)

    @property
    def dragging(self) -> frozenset[str]:
        return frozenset(self._dragging)

    def is_pinned(self, node_id: str) -> bool:
        return node_id in self._pins

    def position(self, node_id: str) -> Point | None:
        return self._pins.get(node_id)

    def drag_start(self, node_id: str) -> None:
        self._dragging.add(node_id)

    def drag_end(self, node_id: str, x: float, y: float) -> Point:
        """Pin ``node_id`` where it was dropped."""
        self._dragging.discard(node_id)
        point = Point(float(x), float(y))
        self._pins[node_id] = point
        logger.debug("Pinned '%s' at (%.1f, %.1f)", node_id, point.x, point.y)
        return point

    def release(self, node_id: str) -> None:
        self._pins.pop(node_id, None)

    def reset(self) -> None:
        """Forget every override."""
        if self._pins:
            logger.info("Clearing %d manual positions", len(self._pins))
        self._pins.clear()
        self._dragging.clear()

    def adopt(self, nodes: Iterable[Node]) -> None:
        """Take over pins that arrived with the data source's nodes."""
        for node in nodes:
            if node.fixed_position is not None and node.id not in self._pins:
                self._pins[node.id] = node.fixed_position

    def apply(self, nodes: Iterable[Node]) -> list[Node]:
        """Return copies of ``nodes`` whose pins match this table."""
        out: list[Node] = []
        for node in nodes:
            pin = self._pins.get(node.id)
            if pin is not None:
                out.append(replace(node, fixed_position=pin, position=pin))
            elif node.fixed_position is not None:
                out.append(replace(node, fixed_position=None))
            else:
                out.append(node)
        return out
