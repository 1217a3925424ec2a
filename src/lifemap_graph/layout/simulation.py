"""Force simulation coordinator.

A ``LayoutEngine`` is built for one layout request: it converts nodes to
simulation state, advances them tick by tick under repulsion, centring,
collision, level and link forces, and hands back positioned copies of the
input nodes. Ticks are produced lazily by ``run()`` so the host decides when
the next unit of work happens and can ``stop()`` at any point.
"""

from __future__ import annotations

__all__ = [
    "LayoutEngine",
    "LayoutFrame",
    "LayoutResult",
    "calculate_layout",
    "calculate_layout_streaming",
    "radial_layout",
    "seed_position",
]

import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import Callable, Iterator

from lifemap_graph.layout.collision import RectangleCollision, settle_overlaps
from lifemap_graph.layout.constants import (
    ALPHA_START,
    SEED_RADIUS_FACTOR,
    SEED_RADIUS_PER_LEVEL,
    SEED_Y_JITTER,
    TRACE_EVERY,
    TRACE_FIRST_TICKS,
)
from lifemap_graph.layout.forces import (
    CenterForce,
    LevelForce,
    LinkForce,
    ManyBodyForce,
    SimulationNode,
)
from lifemap_graph.layout.options import LayoutOptions
from lifemap_graph.layout.radial import radial_positions
from lifemap_graph.layout.sizes import node_size
from lifemap_graph.parser.model import Edge, Node, Point

logger = logging.getLogger(__name__)


@dataclass
class LayoutFrame:
    """Positions after one tick (or the final positions when ``done``)."""

    tick: int
    alpha: float
    positions: dict[str, tuple[float, float]]
    done: bool = False


@dataclass
class LayoutResult:
    """Outcome of a layout run."""

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    ticks: int = 0
    converged: bool = False
    cancelled: bool = False

    def positions(self) -> dict[str, Point]:
        return {n.id: n.position for n in self.nodes if n.position is not None}


def seed_position(level: int, options: LayoutOptions, rng: random.Random) -> Point:
    """Randomized starting point near the band of ``level``."""
    radius = level * SEED_RADIUS_PER_LEVEL
    angle = rng.random() * 2 * math.pi
    return Point(
        options.center_x + math.cos(angle) * radius * SEED_RADIUS_FACTOR,
        options.target_y(level) + (rng.random() - 0.5) * SEED_Y_JITTER,
    )


def _finite(*values: float | None) -> bool:
    return all(v is not None and math.isfinite(v) for v in values)


class LayoutEngine:
    """One layout run over a fixed node/edge set.

    Usage::

        engine = LayoutEngine(options).prepare(nodes, edges)
        for frame in engine.run():
            draw(frame.positions)
        result = engine.result()

    The engine is not reusable: ``run()`` may be consumed once.
    """

    def __init__(self, options: LayoutOptions | None = None) -> None:
        self.options = options or LayoutOptions()
        self.alpha = ALPHA_START
        self.ticks = 0
        self.nodes: list[SimulationNode] = []
        self.edges: list[Edge] = []
        self.warnings: list[str] = []
        self._inputs: list[Node] = []
        self._initial: dict[str, Point] = {}
        self._forces: list = []
        self._rng = random.Random(self.options.seed)
        self._started = False
        self._stopped = False
        self._converged = False
        self._finished = False

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def prepare(self, nodes: list[Node], edges: list[Edge]) -> LayoutEngine:
        """Convert nodes to simulation state and set up the forces."""
        if self._started:
            raise RuntimeError("Cannot prepare a layout run that has already started")
        opts = self.options
        self._inputs = list(nodes)
        if opts.initial_layout == "radial":
            self._initial = radial_positions(self._inputs, opts)
        self.nodes = [self._to_simulation(n) for n in self._inputs]

        ids = {n.id for n in self._inputs}
        self.edges = []
        for edge in edges:
            missing = [e for e in (edge.source, edge.target) if e not in ids]
            if missing:
                self._warn(f"Edge '{edge.id}' references missing node(s) "
                           f"{', '.join(missing)}; ignored")
                continue
            self.edges.append(edge)

        self._forces = [
            ManyBodyForce(opts.node_repulsion_strength, distance_max=opts.distance_max),
            CenterForce(opts.center_x, opts.center_y),
            RectangleCollision(opts.collision_padding),
            LevelForce(opts.center_y, opts.level_separation, opts.level_strength),
        ]
        if self.edges:
            self._forces.append(
                LinkForce(self.edges, self.nodes, opts.link_distance, opts.link_strength)
            )
        return self

    def _to_simulation(self, node: Node) -> SimulationNode:
        width, height = node_size(node)
        sim = SimulationNode(node=node, x=0.0, y=0.0, width=width, height=height)
        fixed = node.fixed_position
        if (
            self.options.preserve_manual_positions
            and fixed is not None
            and _finite(fixed.x, fixed.y)
        ):
            sim.x, sim.y = fixed.x, fixed.y
            sim.fx, sim.fy = fixed.x, fixed.y
        elif node.position is not None and _finite(node.position.x, node.position.y):
            sim.x, sim.y = node.position.x, node.position.y
        else:
            seed = self._initial.get(node.id)
            if seed is None:
                seed = seed_position(node.level, self.options, self._rng)
            sim.x, sim.y = seed.x, seed.y
        return sim

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def converged(self) -> bool:
        return self._converged

    def stop(self) -> None:
        """Halt the run; no further ticks happen. Safe to call at any time."""
        if not self._stopped and not self._finished:
            logger.info("Layout run stopped after %d ticks", self.ticks)
        self._stopped = True

    def run(self) -> Iterator[LayoutFrame]:
        """Return the lazy sequence of frames for this run."""
        if self._started:
            raise RuntimeError("A layout run can only be consumed once")
        self._started = True
        return self._frames()

    def _frames(self) -> Iterator[LayoutFrame]:
        opts = self.options
        logger.info("Layout run: %d nodes, %d edges", len(self.nodes), len(self.edges))
        while not self._stopped:
            if self.alpha < opts.alpha_min:
                self._converged = True
                break
            if self.ticks >= opts.max_iterations:
                break
            self.tick()
            yield self.frame()
        if self._stopped:
            return
        left = settle_overlaps(self.nodes, opts.collision_padding)
        if left:
            self.warnings.append(f"{left} node overlaps could not be resolved")
        self._finished = True
        logger.info(
            "Layout finished after %d ticks (alpha=%.4f, %s)",
            self.ticks,
            self.alpha,
            "converged" if self._converged else "iteration limit reached",
        )
        yield self.frame(done=True)

    def tick(self) -> None:
        """Advance the simulation by one step."""
        opts = self.options
        self.alpha += (0.0 - self.alpha) * opts.alpha_decay
        for force in self._forces:
            force.apply(self.nodes, self.alpha)

        friction = 1.0 - opts.velocity_decay
        for node in self.nodes:
            if node.pinned:
                node.x, node.y = node.fx, node.fy
                node.vx = node.vy = 0.0
            else:
                node.vx *= friction
                node.vy *= friction
                node.x += node.vx
                node.y += node.vy
        self._repair()
        self.ticks += 1

        if self.ticks <= TRACE_FIRST_TICKS or self.ticks % TRACE_EVERY == 0:
            logger.debug("Tick %d, alpha: %.4f", self.ticks, self.alpha)

    def _repair(self) -> None:
        """Re-seed nodes whose state became NaN or infinite."""
        for node in self.nodes:
            if _finite(node.x, node.y, node.vx, node.vy):
                continue
            seed = seed_position(node.level, self.options, self._rng)
            node.x, node.y = seed.x, seed.y
            node.vx = node.vy = 0.0
            self._warn(f"Non-finite position for '{node.id}' at tick {self.ticks}; re-seeded")

    def frame(self, done: bool = False) -> LayoutFrame:
        return LayoutFrame(
            tick=self.ticks,
            alpha=self.alpha,
            positions={n.id: (n.x, n.y) for n in self.nodes},
            done=done,
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def result(self) -> LayoutResult:
        """Positioned copies of the input nodes; inputs are left untouched."""
        out: list[Node] = []
        for sim in self.nodes:
            out.append(replace(
                sim.node,
                position=Point(sim.x, sim.y),
                velocity=Point(sim.vx, sim.vy),
            ))
        return LayoutResult(
            nodes=out,
            edges=list(self.edges),
            warnings=list(self.warnings),
            ticks=self.ticks,
            converged=self._converged,
            cancelled=self._stopped and not self._finished,
        )


def calculate_layout(
    nodes: list[Node],
    edges: list[Edge],
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Lay out ``nodes`` to completion and return positioned copies."""
    if not nodes:
        return LayoutResult()
    engine = LayoutEngine(options).prepare(nodes, edges)
    for _ in engine.run():
        pass
    return engine.result()


def radial_layout(
    nodes: list[Node],
    edges: list[Edge],
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Place ``nodes`` on the radial tree without running any force ticks.

    Stored positions are ignored; pinned nodes stay put when
    ``preserve_manual_positions`` is set. Overlaps are settled as after a
    force run.
    """
    options = (options or LayoutOptions()).replace(
        initial_layout="radial", max_iterations=0
    )
    fresh = [replace(n, position=None) for n in nodes]
    return calculate_layout(fresh, edges, options)


def calculate_layout_streaming(
    nodes: list[Node],
    edges: list[Edge],
    options: LayoutOptions | None = None,
    on_tick: Callable[[LayoutFrame], None] | None = None,
    on_end: Callable[[LayoutResult], None] | None = None,
) -> LayoutResult:
    """Callback flavour of ``calculate_layout``.

    ``on_tick`` receives every intermediate frame, ``on_end`` the final
    result once the run completes.
    """
    if not nodes:
        result = LayoutResult()
        if on_end is not None:
            on_end(result)
        return result
    engine = LayoutEngine(options).prepare(nodes, edges)
    for frame in engine.run():
        if not frame.done and on_tick is not None:
            on_tick(frame)
    result = engine.result()
    if on_end is not None and not result.cancelled:
        on_end(result)
    return result
