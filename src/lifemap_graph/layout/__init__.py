"""Force-directed layout engine for entity hierarchy graphs."""

from lifemap_graph.layout.manual import ManualPositions
from lifemap_graph.layout.options import LayoutOptions
from lifemap_graph.layout.runner import LayoutRunner
from lifemap_graph.layout.simulation import (
    LayoutEngine,
    LayoutFrame,
    LayoutResult,
    calculate_layout,
    calculate_layout_streaming,
    radial_layout,
)

__all__ = [
    "LayoutEngine",
    "LayoutFrame",
    "LayoutOptions",
    "LayoutResult",
    "LayoutRunner",
    "ManualPositions",
    "calculate_layout",
    "calculate_layout_streaming",
    "radial_layout",
]
