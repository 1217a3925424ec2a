"""Theme definitions for graph previews."""

from lifemap_graph.themes.dark import DARK_THEME
from lifemap_graph.themes.light import LIGHT_THEME

THEMES = {
    "light": LIGHT_THEME,
    "dark": DARK_THEME,
}

__all__ = ["THEMES", "LIGHT_THEME", "DARK_THEME"]
