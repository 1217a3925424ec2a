"""lifemap-graph: layout and visibility engine for hierarchical entity graphs."""

__version__ = "0.3.0"
