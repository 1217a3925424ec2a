"""Data model for entity hierarchy graphs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class NodeType(Enum):
    """Kind of entity a node represents."""

    ROOT = "root"
    PERSON = "person"
    CATEGORY = "category"
    DOCUMENT = "document"
    FOLDER = "folder"
    PET = "pet"
    ASSET = "asset"


MIN_LEVEL = 0
MAX_LEVEL = 5

# Root added by the loader when a snapshot has no level-0 node
FAMILY_ROOT_ID = "family-root"
FAMILY_ROOT_LABEL = "Family"


@dataclass(frozen=True)
class Point:
    """A position or velocity on the 2D canvas."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class Node:
    """An entity in the hierarchy.

    Concrete nodes are one of the variant subclasses below; the variant
    fixes ``type`` and carries only the fields relevant to that kind of
    entity.
    """

    type: ClassVar[NodeType]

    id: str
    label: str = ""
    level: int = 0
    position: Point | None = None
    velocity: Point = field(default_factory=Point)
    # Set when the user has pinned the node by dragging it
    fixed_position: Point | None = None
    parent_ids: tuple[str, ...] = ()
    child_count: int = 0
    expanded: bool = False

    def __post_init__(self) -> None:
        # Ordered set: keep first occurrence, drop self references
        seen: list[str] = []
        for pid in self.parent_ids:
            if pid not in seen and pid != self.id:
                seen.append(pid)
        self.parent_ids = tuple(seen)
        self.child_count = max(0, int(self.child_count))
        if not self.label:
            self.label = self.id

    @property
    def is_pinned(self) -> bool:
        return self.fixed_position is not None

    @property
    def has_children(self) -> bool:
        return self.child_count > 0


@dataclass
class RootNode(Node):
    """The family/account node at level 0."""

    type: ClassVar[NodeType] = NodeType.ROOT


@dataclass
class PersonNode(Node):
    """A person in the family."""

    type: ClassVar[NodeType] = NodeType.PERSON
    relationship: str = ""


@dataclass
class CategoryNode(Node):
    """A category or subcategory grouping documents."""

    type: ClassVar[NodeType] = NodeType.CATEGORY
    category: str = ""


@dataclass
class DocumentNode(Node):
    """A leaf document."""

    type: ClassVar[NodeType] = NodeType.DOCUMENT
    category: str = ""
    file_id: str = ""


@dataclass
class FolderNode(Node):
    type: ClassVar[NodeType] = NodeType.FOLDER


@dataclass
class PetNode(Node):
    type: ClassVar[NodeType] = NodeType.PET
    species: str = ""


@dataclass
class AssetNode(Node):
    """A property, vehicle or other owned asset."""

    type: ClassVar[NodeType] = NodeType.ASSET
    asset_kind: str = ""


NODE_CLASSES: dict[NodeType, type[Node]] = {
    NodeType.ROOT: RootNode,
    NodeType.PERSON: PersonNode,
    NodeType.CATEGORY: CategoryNode,
    NodeType.DOCUMENT: DocumentNode,
    NodeType.FOLDER: FolderNode,
    NodeType.PET: PetNode,
    NodeType.ASSET: AssetNode,
}

_missing = set(NodeType) - set(NODE_CLASSES)
if _missing:
    raise RuntimeError(f"No node class for {sorted(t.value for t in _missing)}")


def make_node(node_type: NodeType | str, node_id: str, **kwargs) -> Node:
    """Build the variant node for ``node_type``."""
    return NODE_CLASSES[NodeType(node_type)](id=node_id, **kwargs)


@dataclass
class Edge:
    """A hierarchy or cross-reference relationship between two nodes."""

    id: str
    source: str
    target: str


@dataclass
class GraphSnapshot:
    """A full node/edge set as supplied by the data source."""

    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    root_id: str | None = None

    def add_node(self, node: Node) -> None:
        self.nodes[node.id] = node

    def add_edge(self, edge: Edge) -> None:
        self.edges.append(edge)

    def resolve_root(self) -> str | None:
        """Return the designated root id, or the first level-0 node."""
        if self.root_id is not None:
            return self.root_id
        for node in self.nodes.values():
            if node.level == MIN_LEVEL:
                return node.id
        return None

    def inject_root(
        self,
        root_id: str = FAMILY_ROOT_ID,
        label: str = FAMILY_ROOT_LABEL,
    ) -> bool:
        """Add a family root when the snapshot has no level-0 node.

        Level-1 nodes without an existing parent are attached to the new
        root. Returns False (and changes nothing) when a root is present.
        """
        if self.nodes_at_level(MIN_LEVEL) or root_id in self.nodes:
            return False
        attached = [
            nid for nid, node in self.nodes.items()
            if node.level == MIN_LEVEL + 1
            and not any(p in self.nodes for p in node.parent_ids)
        ]
        for nid in attached:
            node = self.nodes[nid]
            node.parent_ids = node.parent_ids + (root_id,)
            self.edges.append(Edge(id=f"family-to-{nid}", source=root_id, target=nid))
        root = RootNode(id=root_id, label=label, level=MIN_LEVEL,
                        child_count=len(attached))
        self.nodes = {root_id: root, **self.nodes}
        self.root_id = root_id
        return True

    def children(self, node_id: str) -> list[Node]:
        """Return nodes listing ``node_id`` among their parents."""
        return [n for n in self.nodes.values() if node_id in n.parent_ids]

    def nodes_at_level(self, level: int) -> list[Node]:
        return [n for n in self.nodes.values() if n.level == level]

    def recount_children(self) -> None:
        """Recompute ``child_count`` from the parent references."""
        counts: dict[str, int] = {}
        for node in self.nodes.values():
            for pid in node.parent_ids:
                counts[pid] = counts.get(pid, 0) + 1
        for nid, node in self.nodes.items():
            node.child_count = counts.get(nid, 0)
