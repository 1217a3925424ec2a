"""Layout constants used across layout modules.

Centralizes the simulation defaults, numerical guards and node footprint
sizes used by simulation.py, forces.py, collision.py and sizes.py.
"""

# ---------------------------------------------------------------------------
# Simulation defaults (used as LayoutOptions defaults)
# ---------------------------------------------------------------------------
NODE_REPULSION: float = -1000.0
"""Many-body strength; negative values repel."""

LINK_DISTANCE: float = 150.0
"""Rest length of the spring along each edge."""

LINK_STRENGTH: float = 0.1
"""Spring stiffness along each edge."""

ALPHA_DECAY: float = 0.02
"""Per-tick decay of the simulation temperature."""

VELOCITY_DECAY: float = 0.4
"""Fraction of velocity lost per tick (friction)."""

MAX_ITERATIONS: int = 300
"""Maximum number of ticks in one layout run."""

CENTER_X: float = 600.0
"""Horizontal canvas centre the layout gravitates to."""

CENTER_Y: float = 400.0
"""Vertical canvas centre; level bands are placed around it."""

LEVEL_SEPARATION: float = 150.0
"""Vertical distance between consecutive level bands."""

COLLISION_PADDING: float = 20.0
"""Extra spacing added to every node footprint for collision checks."""

# ---------------------------------------------------------------------------
# Simulation internals
# ---------------------------------------------------------------------------
ALPHA_START: float = 1.0
"""Initial temperature of a fresh run."""

ALPHA_MIN: float = 0.001
"""A run is converged once alpha falls below this."""

DISTANCE_MIN: float = 1.0
"""Minimum distance used by the many-body force."""

DISTANCE_MAX: float = 500.0
"""Maximum interaction distance of the many-body force."""

LEVEL_STRENGTH: float = 0.3
"""Damping factor of the level band restoring force."""

MID_LEVEL: float = 2.5
"""Level placed on CENTER_Y; levels above sit higher on the canvas."""

EPSILON: float = 1e-6
"""Smallest distance treated as non-zero."""

TIE_BREAK_NUDGE: float = 1e-3
"""Displacement used when two link endpoints coincide."""

# ---------------------------------------------------------------------------
# Seeding
# ---------------------------------------------------------------------------
SEED_RADIUS_PER_LEVEL: float = 150.0
"""Radius growth per level for randomized initial positions."""

SEED_RADIUS_FACTOR: float = 0.5
"""Fraction of the level radius used for horizontal spread."""

SEED_Y_JITTER: float = 50.0
"""Vertical jitter range around a node's level band."""

INITIAL_LAYOUTS: tuple[str, ...] = ("random", "radial")
"""Ways to seed nodes that arrive without a stored position."""

# ---------------------------------------------------------------------------
# Radial tree
# ---------------------------------------------------------------------------
RADIAL_MAX_RADIUS: float = 600.0
"""Radius of the outermost ring of the radial tree."""

RADIAL_DEFAULT_RADIUS: float = 300.0
"""Ring radius assumed when sizing the gap between two nodes at the centre."""

# ---------------------------------------------------------------------------
# Collision / settling
# ---------------------------------------------------------------------------
SETTLE_MAX_PASSES: int = 100
"""Upper bound on pairwise overlap-removal passes after a run."""

SETTLE_STALL_PASSES: int = 10
"""Passes without a drop in total overlap before the sideways sweep takes over."""

OVERLAP_TOLERANCE: float = 0.5
"""Overlap (in canvas units) below which two boxes count as touching."""

QUADTREE_CAPACITY: int = 8
"""Items per quadtree leaf before it splits."""

QUADTREE_MAX_DEPTH: int = 16
"""Depth at which leaves stop splitting (coincident points)."""

# ---------------------------------------------------------------------------
# Node footprints (square, in canvas units)
# ---------------------------------------------------------------------------
ROOT_SIZE: float = 176.0
"""Family root node, the largest."""

PERSON_LEVEL_SIZE: float = 128.0
"""Any node on the people level."""

DEFAULT_SIZE: float = 96.0
"""Fallback footprint for categories."""

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
TRACE_FIRST_TICKS: int = 5
"""Ticks always traced at DEBUG level at the start of a run."""

TRACE_EVERY: int = 50
"""Tick interval for DEBUG traces after the first few."""
