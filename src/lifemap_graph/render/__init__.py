"""SVG preview rendering of laid-out graphs."""

from lifemap_graph.render.svg import render_svg

__all__ = ["render_svg"]
