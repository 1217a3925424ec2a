"""Dark grey theme."""

from lifemap_graph.parser.model import NodeType
from lifemap_graph.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#2b2b2b",
    node_stroke="#e5e7eb",
    node_stroke_width=1.0,
    node_corner_radius=12.0,
    pinned_stroke="#f87171",
    edge_color="rgba(255, 255, 255, 0.35)",
    edge_width=1.5,
    label_color="#f9fafb",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=12.0,
    title_color="#ffffff",
    title_font_size=22.0,
    type_fills={
        NodeType.ROOT: "#b45309",
        NodeType.PERSON: "#1d4ed8",
        NodeType.CATEGORY: "#6d28d9",
        NodeType.DOCUMENT: "#374151",
        NodeType.FOLDER: "#92400e",
        NodeType.PET: "#047857",
        NodeType.ASSET: "#b91c1c",
    },
)
