"""Theme and style constants for graph preview rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from lifemap_graph.parser.model import NodeType


@dataclass
class Theme:
    """Visual theme for a graph preview."""

    name: str
    background_color: str
    node_stroke: str
    node_stroke_width: float
    node_corner_radius: float
    pinned_stroke: str
    edge_color: str
    edge_width: float
    label_color: str
    label_font_family: str
    label_font_size: float
    title_color: str
    title_font_size: float
    # Fill per entity type
    type_fills: dict[NodeType, str] = field(default_factory=dict)
    default_fill: str = "#cccccc"

    def fill_for(self, node_type: NodeType) -> str:
        return self.type_fills.get(node_type, self.default_fill)
