"""JSON snapshot loading for entity graphs.

A snapshot is the node/edge set handed over by the data source::

    {
      "root": "family-root",
      "nodes": [{"id": "...", "type": "person", "level": 1,
                 "parentIds": ["family-root"], "position": {"x": 0, "y": 0}}],
      "edges": [{"id": "e1", "source": "family-root", "target": "..."}],
      "expanded": ["family-root"],
      "options": {"linkDistance": 150}
    }

Keys are accepted in camelCase (as the web client writes them) or
snake_case.
"""

from __future__ import annotations

__all__ = ["load_snapshot", "parse_snapshot", "dump_positions", "SnapshotData"]

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from lifemap_graph.parser.model import (
    NODE_CLASSES,
    Edge,
    GraphSnapshot,
    Node,
    NodeType,
    Point,
)

logger = logging.getLogger(__name__)

_TYPE_ALIASES = {
    "family": "root",
    "subcategory": "category",
}


@dataclass
class SnapshotData:
    """Parsed snapshot: the graph plus the optional host state."""

    graph: GraphSnapshot
    expanded: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)


def _get(raw: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return default


def _parse_point(raw: Any, what: str) -> Point | None:
    if raw is None:
        return None
    if isinstance(raw, dict):
        x, y = raw.get("x"), raw.get("y")
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        x, y = raw
    else:
        raise ValueError(f"Invalid {what}: expected {{'x', 'y'}} or [x, y], got {raw!r}")
    try:
        return Point(float(x), float(y))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {what}: non-numeric coordinates {raw!r}") from None


def _parse_node(raw: dict) -> Node:
    if "id" not in raw:
        raise ValueError(f"Node without an 'id': {raw!r}")
    node_id = str(raw["id"])

    type_name = str(_get(raw, "type", default="folder")).lower()
    type_name = _TYPE_ALIASES.get(type_name, type_name)
    try:
        node_type = NodeType(type_name)
    except ValueError:
        known = ", ".join(t.value for t in NodeType)
        raise ValueError(
            f"Node '{node_id}' has unknown type '{type_name}'. "
            f"Expected one of: {known}"
        ) from None

    position = _parse_point(raw.get("position"), f"position of '{node_id}'")
    fixed = _parse_point(
        _get(raw, "fixedPosition", "fixed_position"), f"fixed position of '{node_id}'"
    )
    # Older clients only flag the node and keep the pin in `position`
    if fixed is None and _get(raw, "isManuallyPositioned", "is_manually_positioned"):
        fixed = position

    parent_ids = _get(raw, "parentIds", "parent_ids", default=[]) or []
    if isinstance(parent_ids, str):
        parent_ids = [parent_ids]

    child_count = _get(raw, "childCount", "child_count")
    if child_count is None:
        child_count = 1 if _get(raw, "hasChildren", "has_children") else 0

    kwargs: dict[str, Any] = dict(
        label=str(raw.get("label", "")),
        level=int(raw.get("level", 0)),
        position=position,
        fixed_position=fixed,
        parent_ids=tuple(str(p) for p in parent_ids),
        child_count=int(child_count),
        expanded=bool(raw.get("expanded", False)),
    )

    # Variant-specific fields, only those the variant declares
    node_cls = NODE_CLASSES[node_type]
    extras = {
        "relationship": ("relationship",),
        "category": ("category",),
        "file_id": ("fileId", "file_id"),
        "species": ("species",),
        "asset_kind": ("assetKind", "asset_kind"),
    }
    declared = node_cls.__dataclass_fields__
    for name, keys in extras.items():
        if name in declared:
            value = _get(raw, *keys)
            if value is not None:
                kwargs[name] = str(value)

    return node_cls(id=node_id, **kwargs)


def _parse_edge(raw: dict, index: int) -> Edge:
    try:
        source = str(raw["source"])
        target = str(raw["target"])
    except KeyError as e:
        raise ValueError(f"Edge #{index} is missing {e.args[0]!r}") from None
    edge_id = str(raw.get("id") or f"{source}->{target}")
    return Edge(id=edge_id, source=source, target=target)


def parse_snapshot(data: dict, inject_root: bool = False) -> SnapshotData:
    """Build a snapshot from decoded JSON.

    With ``inject_root``, a snapshot that has no level-0 node gets a family
    root above its parentless level-1 nodes.
    """
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object with 'nodes' and 'edges'")
    if "nodes" not in data:
        raise ValueError("Snapshot has no 'nodes' list")

    graph = GraphSnapshot(root_id=data.get("root"))
    for raw in data.get("nodes") or []:
        node = _parse_node(raw)
        if node.id in graph.nodes:
            logger.warning("Duplicate node id '%s'; keeping the last definition", node.id)
        graph.add_node(node)

    for i, raw in enumerate(data.get("edges") or []):
        graph.add_edge(_parse_edge(raw, i))

    if not any("childCount" in raw or "child_count" in raw for raw in data.get("nodes") or []):
        graph.recount_children()

    if inject_root and graph.inject_root():
        logger.info("Injected root node '%s'", graph.root_id)

    logger.debug(
        "Parsed snapshot: %d nodes, %d edges", len(graph.nodes), len(graph.edges)
    )
    return SnapshotData(
        graph=graph,
        expanded=[str(x) for x in data.get("expanded") or []],
        options=dict(data.get("options") or {}),
    )


def load_snapshot(path: Path, inject_root: bool = False) -> SnapshotData:
    """Read and parse a JSON snapshot file."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: not valid JSON ({e})") from None
    return parse_snapshot(data, inject_root=inject_root)


def dump_positions(nodes) -> dict[str, dict[str, Any]]:
    """Return the positions to hand back to the data source."""
    out: dict[str, dict[str, Any]] = {}
    for node in nodes:
        if node.position is None:
            continue
        entry: dict[str, Any] = {
            "x": round(node.position.x, 3),
            "y": round(node.position.y, 3),
        }
        if node.fixed_position is not None:
            entry["fixed"] = True
        out[node.id] = entry
    return out
