"""Layout configuration.

A single ``LayoutOptions`` value is built by the caller (CLI flags, a
snapshot's ``options`` block, or code) and passed into the engine. Values
outside their valid range are clamped with a warning instead of rejected.
"""

from __future__ import annotations

__all__ = ["LayoutOptions"]

import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Mapping

from lifemap_graph.layout.constants import (
    ALPHA_DECAY,
    ALPHA_MIN,
    CENTER_X,
    CENTER_Y,
    COLLISION_PADDING,
    DISTANCE_MAX,
    DISTANCE_MIN,
    INITIAL_LAYOUTS,
    LEVEL_SEPARATION,
    LEVEL_STRENGTH,
    LINK_DISTANCE,
    LINK_STRENGTH,
    MAX_ITERATIONS,
    MID_LEVEL,
    NODE_REPULSION,
    VELOCITY_DECAY,
)

logger = logging.getLogger(__name__)

# field -> (minimum, maximum); None means unbounded
_RANGES: dict[str, tuple[float | None, float | None]] = {
    "node_repulsion_strength": (None, None),
    "link_distance": (0.0, None),
    "link_strength": (0.0, 1.0),
    "alpha_decay": (1e-4, 1.0),
    "velocity_decay": (0.0, 1.0),
    "max_iterations": (0, None),
    "center_x": (None, None),
    "center_y": (None, None),
    "level_separation": (0.0, None),
    "collision_padding": (0.0, None),
    "alpha_min": (1e-6, 1.0),
    "distance_max": (DISTANCE_MIN, None),
    "level_strength": (0.0, 1.0),
}


def _camel_to_snake(name: str) -> str:
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


# Names used by the web client that differ from the field names
_ALIASES = {
    "strength": "link_strength",
    "distance": "link_distance",
    "node_repulsion": "node_repulsion_strength",
    "iterations": "max_iterations",
}


@dataclass(frozen=True)
class LayoutOptions:
    """Parameters of one layout run."""

    node_repulsion_strength: float = NODE_REPULSION
    link_distance: float = LINK_DISTANCE
    link_strength: float = LINK_STRENGTH
    alpha_decay: float = ALPHA_DECAY
    velocity_decay: float = VELOCITY_DECAY
    max_iterations: int = MAX_ITERATIONS
    center_x: float = CENTER_X
    center_y: float = CENTER_Y
    level_separation: float = LEVEL_SEPARATION
    collision_padding: float = COLLISION_PADDING
    preserve_manual_positions: bool = True
    alpha_min: float = ALPHA_MIN
    distance_max: float = DISTANCE_MAX
    level_strength: float = LEVEL_STRENGTH
    # Seed for randomized initial positions; None draws a fresh one
    seed: int | None = None
    # How nodes without a stored position start: "random" or "radial"
    initial_layout: str = INITIAL_LAYOUTS[0]

    def __post_init__(self) -> None:
        defaults = LayoutOptions.__dataclass_fields__
        for name, (lo, hi) in _RANGES.items():
            value = getattr(self, name)
            default = defaults[name].default
            try:
                number = float(value)
            except (TypeError, ValueError):
                number = math.nan
            if not math.isfinite(number):
                logger.warning("Option %s=%r is not a finite number; using %r",
                               name, value, default)
                number = float(default)
            clamped = number
            if lo is not None and clamped < lo:
                clamped = lo
            if hi is not None and clamped > hi:
                clamped = hi
            if clamped != number:
                logger.warning("Option %s=%r out of range; clamped to %r",
                               name, value, clamped)
            if name == "max_iterations":
                clamped = int(clamped)
            object.__setattr__(self, name, clamped)
        object.__setattr__(
            self, "preserve_manual_positions", bool(self.preserve_manual_positions)
        )
        if self.initial_layout not in INITIAL_LAYOUTS:
            logger.warning("Unknown initial layout %r; using %r",
                           self.initial_layout, INITIAL_LAYOUTS[0])
            object.__setattr__(self, "initial_layout", INITIAL_LAYOUTS[0])

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None = None, **overrides: Any) -> LayoutOptions:
        """Build options from camelCase or snake_case keys.

        Unknown keys are logged and ignored. ``overrides`` win over
        ``mapping``.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in {**(mapping or {}), **overrides}.items():
            name = _camel_to_snake(key)
            name = _ALIASES.get(name, name)
            if name not in known:
                logger.warning("Ignoring unknown layout option '%s'", key)
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def replace(self, **changes: Any) -> LayoutOptions:
        """Return a copy with ``changes`` applied (and re-clamped)."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(changes)
        return LayoutOptions(**values)

    def target_y(self, level: int) -> float:
        """Vertical centre of the band for ``level``."""
        return self.center_y + (level - MID_LEVEL) * self.level_separation
