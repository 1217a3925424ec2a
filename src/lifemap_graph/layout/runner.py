"""Cooperative scheduling of layout runs.

A host (animation loop, timer, CLI) owns one ``LayoutRunner``. Starting a
new layout cancels the one in flight, so two integrators never work on
diverging node sets.
"""

from __future__ import annotations

__all__ = ["LayoutRunner"]

import logging
from typing import Iterator

from lifemap_graph.layout.options import LayoutOptions
from lifemap_graph.layout.simulation import LayoutEngine, LayoutFrame, LayoutResult
from lifemap_graph.parser.model import Edge, Node

logger = logging.getLogger(__name__)


class LayoutRunner:
    """Holds at most one in-flight ``LayoutEngine``."""

    def __init__(self) -> None:
        self._engine: LayoutEngine | None = None
        self._frames: Iterator[LayoutFrame] | None = None
        self.last_result: LayoutResult | None = None

    @property
    def engine(self) -> LayoutEngine | None:
        return self._engine

    @property
    def running(self) -> bool:
        return self._frames is not None

    def start(
        self,
        nodes: list[Node],
        edges: list[Edge],
        options: LayoutOptions | None = None,
    ) -> LayoutEngine:
        """Cancel any in-flight run and start a fresh one."""
        if self.running:
            logger.info("Cancelling in-flight layout before starting a new one")
            self.stop()
        engine = LayoutEngine(options).prepare(nodes, edges)
        self._engine = engine
        self._frames = engine.run()
        return engine

    def step(self) -> LayoutFrame | None:
        """Advance the current run by one tick.

        Returns the frame, or None when there is nothing left to do. The
        final frame has ``done`` set and records ``last_result``.
        """
        if self._frames is None or self._engine is None:
            return None
        frame = next(self._frames, None)
        if frame is None or frame.done:
            self.last_result = self._engine.result()
            self._frames = None
        return frame

    def run_to_end(self) -> LayoutResult | None:
        """Drain the current run and return its result."""
        while self.running:
            self.step()
        return self.last_result

    def stop(self) -> None:
        """Cancel the current run, if any. Safe to call at any time."""
        if self._engine is not None and self._frames is not None:
            self._engine.stop()
            self.last_result = self._engine.result()
        self._frames = None
