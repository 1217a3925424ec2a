"""Graph session: the state a host keeps between user interactions.

Ties the visibility resolver, manual overrides and the layout runner
together. User actions (expand, collapse, drag, reset) update the session
state and start a re-layout; the host either drains it with ``finish()`` or
advances it tick by tick with ``step()``.
"""

from __future__ import annotations

__all__ = ["GraphSession", "RELAYOUT_MODES"]

import logging
from dataclasses import replace
from typing import Iterable

from lifemap_graph.layout.manual import ManualPositions
from lifemap_graph.layout.options import LayoutOptions
from lifemap_graph.layout.runner import LayoutRunner
from lifemap_graph.layout.simulation import LayoutEngine, LayoutFrame, LayoutResult
from lifemap_graph.parser.model import Edge, GraphSnapshot, Node, Point
from lifemap_graph.visibility.expansion import ExpansionSet
from lifemap_graph.visibility.resolver import (
    find_orphans,
    resolve_visible,
    visible_graph,
)

logger = logging.getLogger(__name__)

RELAYOUT_MODES = ("visible", "full")


class GraphSession:
    """Interactive state over one graph snapshot."""

    def __init__(
        self,
        graph: GraphSnapshot,
        options: LayoutOptions | None = None,
        expanded: Iterable[str] = (),
        relayout_mode: str = "visible",
    ) -> None:
        if relayout_mode not in RELAYOUT_MODES:
            raise ValueError(
                f"Unknown relayout mode '{relayout_mode}'. "
                f"Expected one of: {', '.join(RELAYOUT_MODES)}"
            )
        self.graph = graph
        self.options = options or LayoutOptions()
        self.relayout_mode = relayout_mode
        self.root_id = graph.resolve_root()
        self.expansion = ExpansionSet.from_iterable(
            nid for nid in expanded if nid in graph.nodes
        )
        self.manual = ManualPositions()
        self.manual.adopt(graph.nodes.values())
        self.runner = LayoutRunner()
        self.warnings: list[str] = []

        for nid in find_orphans(graph.nodes):
            msg = f"Node '{nid}' has no existing parent; hidden beyond level 2"
            logger.warning(msg)
            self.warnings.append(msg)
        self._sync_expanded_flags()

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def visible_ids(self) -> frozenset[str]:
        return resolve_visible(self.graph.nodes, self.expansion.ids, self.root_id)

    def visible(self) -> tuple[list[Node], list[Edge]]:
        """Visible nodes and the edges between them, for the renderer."""
        return visible_graph(
            self.graph.nodes, self.graph.edges, self.expansion.ids, self.root_id
        )

    def _subgraph(self, ids: frozenset[str] | set[str]) -> tuple[list[Node], list[Edge]]:
        nodes = [n for nid, n in self.graph.nodes.items() if nid in ids]
        edges = [e for e in self.graph.edges if e.source in ids and e.target in ids]
        return nodes, edges

    def _sync_expanded_flags(self) -> None:
        for nid, node in self.graph.nodes.items():
            node.expanded = nid in self.expansion

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def expand(self, node_id: str) -> LayoutEngine:
        self.expansion = self.expansion.expand(node_id)
        self._sync_expanded_flags()
        return self.start_layout()

    def collapse(self, node_id: str) -> LayoutEngine:
        self.expansion = self.expansion.collapse(node_id, self.graph.nodes)
        self._sync_expanded_flags()
        return self.start_layout()

    def toggle(self, node_id: str) -> LayoutEngine:
        if node_id in self.expansion:
            return self.collapse(node_id)
        return self.expand(node_id)

    def drag_start(self, node_id: str) -> None:
        self.manual.drag_start(node_id)

    def drag_end(self, node_id: str, x: float, y: float) -> Point:
        """Pin a dropped node where the user left it."""
        point = self.manual.drag_end(node_id, x, y)
        node = self.graph.nodes.get(node_id)
        if node is not None:
            self.graph.nodes[node_id] = replace(node, position=point, fixed_position=point)
        return point

    def reset(self, expanded: Iterable[str] = ()) -> LayoutEngine:
        """Drop manual pins and stored positions and lay out from scratch.

        The expansion set is cleared, then set to the ids in ``expanded``
        that exist in the graph.
        """
        self.runner.stop()
        self.expansion = ExpansionSet.from_iterable(
            nid for nid in expanded if nid in self.graph.nodes
        )
        self.manual.reset()
        for nid, node in list(self.graph.nodes.items()):
            self.graph.nodes[nid] = replace(node, position=None, fixed_position=None)
        self._sync_expanded_flags()
        return self.start_layout(
            preserve_manual_positions=False,
            ids=frozenset(self.graph.nodes),
        )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def start_layout(
        self,
        preserve_manual_positions: bool = True,
        ids: frozenset[str] | None = None,
    ) -> LayoutEngine:
        """Start a re-layout, cancelling any run still in flight."""
        if ids is None:
            ids = (self.visible_ids() if self.relayout_mode == "visible"
                   else frozenset(self.graph.nodes))
        nodes, edges = self._subgraph(ids)
        nodes = self.manual.apply(nodes)
        options = self.options
        if options.preserve_manual_positions != preserve_manual_positions:
            options = options.replace(preserve_manual_positions=preserve_manual_positions)
        return self.runner.start(nodes, edges, options)

    def step(self) -> LayoutFrame | None:
        """Advance the current layout by one tick; store positions when done."""
        frame = self.runner.step()
        if frame is not None and frame.done and self.runner.last_result is not None:
            self._apply(self.runner.last_result)
        return frame

    def finish(self) -> LayoutResult | None:
        """Drain the current layout and store the final positions."""
        if not self.runner.running:
            return self.runner.last_result
        result = self.runner.run_to_end()
        if result is not None and not result.cancelled:
            self._apply(result)
        return result

    def layout(self) -> LayoutResult:
        """Lay out the current selection to completion."""
        engine = self.start_layout()
        self.finish()
        return engine.result()

    def _apply(self, result: LayoutResult) -> None:
        for node in result.nodes:
            current = self.graph.nodes.get(node.id)
            if current is None:
                continue
            self.graph.nodes[node.id] = replace(current, position=node.position)
        self.warnings.extend(w for w in result.warnings if w not in self.warnings)
