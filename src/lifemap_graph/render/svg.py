"""SVG preview of a laid-out graph using drawsvg."""

from __future__ import annotations

__all__ = ["render_svg"]

import drawsvg as draw

from lifemap_graph.layout.sizes import node_size
from lifemap_graph.parser.model import Edge, Node
from lifemap_graph.render.style import Theme

# Characters kept on a node label before truncating
MAX_LABEL_CHARS = 16


def render_svg(
    nodes: list[Node],
    edges: list[Edge],
    theme: Theme,
    title: str = "",
    width: int | None = None,
    height: int | None = None,
    padding: float = 40.0,
) -> str:
    """Render positioned nodes and the edges between them to an SVG string.

    Nodes without a position are skipped.
    """
    placed = [n for n in nodes if n.position is not None]
    if not placed:
        return '<svg xmlns="http://www.w3.org/2000/svg"></svg>\n'

    boxes = {}
    for node in placed:
        w, h = node_size(node)
        boxes[node.id] = (node.position.x - w / 2, node.position.y - h / 2, w, h)

    min_x = min(b[0] for b in boxes.values())
    min_y = min(b[1] for b in boxes.values())
    max_x = max(b[0] + b[2] for b in boxes.values())
    max_y = max(b[1] + b[3] for b in boxes.values())

    title_space = theme.title_font_size + 20 if title else 0
    # Shift everything so the content starts at the padding
    ox = padding - min_x
    oy = padding + title_space - min_y

    svg_width = width or int(max_x - min_x + padding * 2)
    svg_height = height or int(max_y - min_y + padding * 2 + title_space)

    d = draw.Drawing(svg_width, svg_height)
    d.append(draw.Rectangle(0, 0, svg_width, svg_height, fill=theme.background_color))

    if title:
        d.append(draw.Text(
            title,
            theme.title_font_size,
            padding, padding,
            fill=theme.title_color,
            font_family=theme.label_font_family,
            font_weight="bold",
        ))

    _render_edges(d, edges, placed, theme, ox, oy)
    _render_nodes(d, placed, boxes, theme, ox, oy)

    svg = d.as_svg()
    if not svg.endswith("\n"):
        svg += "\n"
    return svg


def _render_edges(
    d: draw.Drawing,
    edges: list[Edge],
    nodes: list[Node],
    theme: Theme,
    ox: float,
    oy: float,
) -> None:
    """Draw edges as straight lines between node centres (behind nodes)."""
    positions = {n.id: n.position for n in nodes}
    for edge in edges:
        a = positions.get(edge.source)
        b = positions.get(edge.target)
        if a is None or b is None:
            continue
        d.append(draw.Line(
            a.x + ox, a.y + oy, b.x + ox, b.y + oy,
            stroke=theme.edge_color,
            stroke_width=theme.edge_width,
        ))


def _render_nodes(
    d: draw.Drawing,
    nodes: list[Node],
    boxes: dict[str, tuple[float, float, float, float]],
    theme: Theme,
    ox: float,
    oy: float,
) -> None:
    for node in nodes:
        x, y, w, h = boxes[node.id]
        pinned = node.fixed_position is not None
        d.append(draw.Rectangle(
            x + ox, y + oy, w, h,
            rx=theme.node_corner_radius, ry=theme.node_corner_radius,
            fill=theme.fill_for(node.type),
            stroke=theme.pinned_stroke if pinned else theme.node_stroke,
            stroke_width=theme.node_stroke_width * (2 if pinned else 1),
        ))
        label = node.label
        if len(label) > MAX_LABEL_CHARS:
            label = label[: MAX_LABEL_CHARS - 1] + "…"
        d.append(draw.Text(
            label,
            theme.label_font_size,
            node.position.x + ox, node.position.y + oy,
            fill=theme.label_color,
            font_family=theme.label_font_family,
            text_anchor="middle",
            dominant_baseline="central",
        ))
        if node.has_children:
            # Expansion marker in the lower-right corner
            d.append(draw.Text(
                "−" if node.expanded else "+",
                theme.label_font_size,
                x + ox + w - 10, y + oy + h - 10,
                fill=theme.label_color,
                font_family=theme.label_font_family,
                text_anchor="middle",
                dominant_baseline="central",
            ))
