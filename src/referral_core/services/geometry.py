"""
Node sizing shared by the renderer and hit-testing.

Sizes are in screen pixels; dividing by zoom gives graph units, so nodes
stay the same size on screen at any zoom.
"""

# Base diameter-ish size per level: roots biggest
LEVEL_BASE_SIZES = (16.0, 14.0, 12.0)
DEEP_LEVEL_SIZE = 10.0
INDICATION_BONUS = 1.5


def node_base_size(level: int, indication_count: int) -> float:
    """Screen-space radius before zoom compensation."""
    base = LEVEL_BASE_SIZES[level] if 0 <= level < len(LEVEL_BASE_SIZES) else DEEP_LEVEL_SIZE
    return base + indication_count * INDICATION_BONUS


def render_radius(level: int, indication_count: int, zoom: float) -> float:
    """Radius in graph units at the given zoom."""
    return node_base_size(level, indication_count) / zoom
