"""Graph validator: programmatic checks for data-integrity and layout defects.

Runs a suite of checks against a snapshot and returns a list of Violation
objects describing any problems found. Nothing here raises: the engine
degrades gracefully on bad data and the caller decides what to surface.
"""

from __future__ import annotations

__all__ = [
    "Severity",
    "Violation",
    "validate_graph",
    "check_edge_endpoints",
    "check_parents",
    "check_root",
    "check_levels",
    "check_cycles",
    "check_overlaps",
]

from dataclasses import dataclass, field
from enum import Enum

import networkx as nx

from lifemap_graph.layout.collision import find_overlaps
from lifemap_graph.layout.constants import COLLISION_PADDING, OVERLAP_TOLERANCE
from lifemap_graph.layout.forces import SimulationNode
from lifemap_graph.layout.sizes import node_size
from lifemap_graph.parser.model import MAX_LEVEL, MIN_LEVEL, GraphSnapshot, Node
from lifemap_graph.visibility.expansion import hierarchy_graph


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class Violation:
    check: str
    severity: Severity
    message: str
    context: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.check}: {self.message}"


def validate_graph(graph: GraphSnapshot) -> list[Violation]:
    """Run all data checks and return violations."""
    violations: list[Violation] = []
    violations.extend(check_root(graph))
    violations.extend(check_levels(graph))
    violations.extend(check_parents(graph))
    violations.extend(check_edge_endpoints(graph))
    violations.extend(check_cycles(graph))
    return violations


def check_edge_endpoints(graph: GraphSnapshot) -> list[Violation]:
    """Edges must reference existing nodes; offenders are dropped by the engine."""
    violations: list[Violation] = []
    for edge in graph.edges:
        for end, nid in (("source", edge.source), ("target", edge.target)):
            if nid not in graph.nodes:
                violations.append(Violation(
                    check="edge_endpoints",
                    severity=Severity.WARNING,
                    message=f"Edge '{edge.id}' {end} '{nid}' does not exist",
                    context={"edge": edge.id, end: nid},
                ))
    return violations


def check_parents(graph: GraphSnapshot) -> list[Violation]:
    """Every non-root node needs at least one existing parent."""
    violations: list[Violation] = []
    for nid, node in graph.nodes.items():
        if node.level == MIN_LEVEL:
            continue
        if not node.parent_ids:
            violations.append(Violation(
                check="parents",
                severity=Severity.WARNING,
                message=f"Node '{nid}' (level {node.level}) has no parent",
                context={"node": nid},
            ))
            continue
        missing = [p for p in node.parent_ids if p not in graph.nodes]
        if len(missing) == len(node.parent_ids):
            violations.append(Violation(
                check="parents",
                severity=Severity.WARNING,
                message=(f"Node '{nid}' is orphaned: parents "
                         f"{', '.join(missing)} do not exist"),
                context={"node": nid, "missing": missing},
            ))
        elif missing:
            violations.append(Violation(
                check="parents",
                severity=Severity.WARNING,
                message=f"Node '{nid}' lists missing parent(s) {', '.join(missing)}",
                context={"node": nid, "missing": missing},
            ))
    return violations


def check_root(graph: GraphSnapshot) -> list[Violation]:
    """Exactly one level-0 node, matching the designated root if any."""
    roots = [n.id for n in graph.nodes_at_level(MIN_LEVEL)]
    if not graph.nodes:
        return []
    if not roots:
        return [Violation("root", Severity.ERROR, "No level-0 root node")]
    violations: list[Violation] = []
    if len(roots) > 1:
        violations.append(Violation(
            check="root",
            severity=Severity.ERROR,
            message=f"Multiple level-0 nodes: {', '.join(sorted(roots))}",
            context={"roots": sorted(roots)},
        ))
    if graph.root_id is not None and graph.root_id not in roots:
        violations.append(Violation(
            check="root",
            severity=Severity.ERROR,
            message=f"Designated root '{graph.root_id}' is not a level-0 node",
            context={"root": graph.root_id},
        ))
    return violations


def check_levels(graph: GraphSnapshot) -> list[Violation]:
    """Levels lie in range and never decrease from parent to child."""
    violations: list[Violation] = []
    for nid, node in graph.nodes.items():
        if not MIN_LEVEL <= node.level <= MAX_LEVEL:
            violations.append(Violation(
                check="levels",
                severity=Severity.ERROR,
                message=f"Node '{nid}' has level {node.level} outside "
                        f"{MIN_LEVEL}..{MAX_LEVEL}",
                context={"node": nid, "level": node.level},
            ))
        for pid in node.parent_ids:
            parent = graph.nodes.get(pid)
            if parent is not None and parent.level > node.level:
                violations.append(Violation(
                    check="levels",
                    severity=Severity.WARNING,
                    message=f"Level decreases from '{pid}' ({parent.level}) "
                            f"to child '{nid}' ({node.level})",
                    context={"parent": pid, "child": nid},
                ))
    return violations


def check_cycles(graph: GraphSnapshot) -> list[Violation]:
    """The parent relation must be acyclic."""
    G = hierarchy_graph(graph.nodes)
    violations: list[Violation] = []
    for cycle in nx.simple_cycles(G):
        violations.append(Violation(
            check="cycles",
            severity=Severity.ERROR,
            message=f"Parent cycle: {' -> '.join(cycle + cycle[:1])}",
            context={"cycle": cycle},
        ))
    return violations


def check_overlaps(
    nodes: list[Node],
    padding: float = COLLISION_PADDING,
    tolerance: float = OVERLAP_TOLERANCE,
) -> list[Violation]:
    """Positioned nodes whose padded boxes overlap."""
    sims = []
    for node in nodes:
        if node.position is None:
            continue
        w, h = node_size(node)
        sims.append(SimulationNode(node=node, x=node.position.x, y=node.position.y,
                                   width=w, height=h))
    return [
        Violation(
            check="overlap",
            severity=Severity.WARNING,
            message=f"Nodes '{o.a.id}' and '{o.b.id}' overlap by {o.depth:.1f}",
            context={"a": o.a.id, "b": o.b.id, "depth": o.depth},
        )
        for o in find_overlaps(sims, padding, tolerance)
    ]
