"""Node footprint table.

Nodes are drawn as squares whose size depends on hierarchy level first and
entity type second.
"""

from __future__ import annotations

__all__ = ["node_size", "TYPE_SIZES"]

from lifemap_graph.layout.constants import DEFAULT_SIZE, PERSON_LEVEL_SIZE, ROOT_SIZE
from lifemap_graph.parser.model import Node, NodeType

TYPE_SIZES: dict[NodeType, float] = {
    NodeType.ROOT: ROOT_SIZE,
    NodeType.PERSON: 112.0,
    NodeType.CATEGORY: DEFAULT_SIZE,
    NodeType.DOCUMENT: 80.0,
    NodeType.FOLDER: 88.0,
    NodeType.PET: 88.0,
    NodeType.ASSET: 96.0,
}

_missing = set(NodeType) - set(TYPE_SIZES)
if _missing:
    raise RuntimeError(f"No footprint for {sorted(t.value for t in _missing)}")


def node_size(node: Node) -> tuple[float, float]:
    """Return (width, height) of a node's footprint."""
    if node.level == 0:
        side = ROOT_SIZE
    elif node.level == 1:
        side = PERSON_LEVEL_SIZE
    else:
        side = TYPE_SIZES[node.type]
    return side, side
