"""Graph data model and snapshot loading."""

from lifemap_graph.parser.model import (
    Edge,
    GraphSnapshot,
    Node,
    NodeType,
    Point,
)
from lifemap_graph.parser.snapshot import dump_positions, load_snapshot, parse_snapshot

__all__ = [
    "Edge",
    "GraphSnapshot",
    "Node",
    "NodeType",
    "Point",
    "dump_positions",
    "load_snapshot",
    "parse_snapshot",
]
