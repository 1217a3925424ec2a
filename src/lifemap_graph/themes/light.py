"""Light theme."""

from lifemap_graph.parser.model import NodeType
from lifemap_graph.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="#ffffff",
    node_stroke="#4b5563",
    node_stroke_width=1.5,
    node_corner_radius=12.0,
    pinned_stroke="#dc2626",
    edge_color="#9ca3af",
    edge_width=1.5,
    label_color="#111827",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=12.0,
    title_color="#111111",
    title_font_size=22.0,
    type_fills={
        NodeType.ROOT: "#fde68a",
        NodeType.PERSON: "#bfdbfe",
        NodeType.CATEGORY: "#ddd6fe",
        NodeType.DOCUMENT: "#f3f4f6",
        NodeType.FOLDER: "#fef3c7",
        NodeType.PET: "#bbf7d0",
        NodeType.ASSET: "#fecaca",
    },
)
