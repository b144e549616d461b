"""
Force relaxation shared by both layout strategies.

The hierarchical layout runs a few gentle passes (horizontal repulsion
between close same-level nodes plus a pull back to the level band); the
circular layout runs full relaxation (inverse-square repulsion between all
pairs plus springs along referral links). Both are the same loop with
different coefficients.

Updates are simultaneous: forces for a pass are computed from the positions
at the start of the pass, so the result does not depend on iteration order.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..domain.models import Point

Bounds = Tuple[float, float, float, float]  # min_x, min_y, max_x, max_y

# Distances below this are treated as this, keeping repulsion finite
MIN_DISTANCE = 1.0


@dataclass
class ForceParams:
    """Coefficients for one relaxation run."""
    passes: int
    repulsion: float
    inverse_square: bool = True        # repulsion / d^2, else repulsion / (|d| + 1)
    cutoff: Optional[float] = None     # ignore pairs at or beyond this distance
    same_level_only: bool = False
    horizontal_only: bool = False      # repulsion acts on x only
    attraction: float = 0.0            # spring constant along adjacency
    band_pull: float = 0.0             # pull of y towards the band target
    step_x: float = 0.01
    step_y: float = 0.01
    bounds: Optional[Bounds] = None    # clamp after every pass


def relax(
    positions: Dict[str, Point],
    params: ForceParams,
    levels: Optional[Dict[str, int]] = None,
    adjacency: Optional[Dict[str, List[str]]] = None,
    band_targets: Optional[Dict[str, float]] = None,
) -> Dict[str, Point]:
    """
    Run params.passes relaxation passes and return the new positions.

    Args:
        positions: starting position per node id (not modified)
        params: force coefficients
        levels: node level per id, required when same_level_only is set
        adjacency: neighbor ids per node, used for spring attraction
        band_targets: target y per node id, used for band_pull

    Returns:
        New position per node id, same keys as positions
    """
    ids = list(positions)
    order = {node_id: i for i, node_id in enumerate(ids)}
    current = dict(positions)

    for _ in range(params.passes):
        forces: Dict[str, List[float]] = {node_id: [0.0, 0.0] for node_id in ids}

        for i, a in enumerate(ids):
            ax, ay = current[a]
            for b in ids[i + 1:]:
                if params.same_level_only and levels is not None and levels[a] != levels[b]:
                    continue
                bx, by = current[b]
                dx = ax - bx
                dy = 0.0 if params.horizontal_only else ay - by
                dist = math.hypot(dx, dy)
                if params.cutoff is not None and dist >= params.cutoff:
                    continue

                if dist == 0.0:
                    # Coincident: push apart along x, earlier node to the left
                    ux, uy = (-1.0, 0.0) if order[a] < order[b] else (1.0, 0.0)
                else:
                    ux, uy = dx / dist, dy / dist

                if params.inverse_square:
                    d = max(dist, MIN_DISTANCE)
                    magnitude = params.repulsion / (d * d)
                else:
                    magnitude = params.repulsion / (dist + 1.0)

                forces[a][0] += ux * magnitude
                forces[a][1] += uy * magnitude
                forces[b][0] -= ux * magnitude
                forces[b][1] -= uy * magnitude

        if params.attraction and adjacency is not None:
            for a in ids:
                ax, ay = current[a]
                for b in adjacency.get(a, []):
                    if b not in current:
                        continue
                    bx, by = current[b]
                    dx = bx - ax
                    dy = by - ay
                    dist = math.hypot(dx, dy)
                    if dist == 0.0:
                        continue
                    magnitude = params.attraction * dist
                    forces[a][0] += dx / dist * magnitude
                    forces[a][1] += dy / dist * magnitude

        if params.band_pull and band_targets is not None:
            for a in ids:
                target = band_targets.get(a)
                if target is not None:
                    forces[a][1] += (target - current[a][1]) * params.band_pull

        updated: Dict[str, Point] = {}
        for a in ids:
            x, y = current[a]
            fx, fy = forces[a]
            x += fx * params.step_x
            y += fy * params.step_y
            if params.bounds is not None:
                x, y = clamp_point((x, y), params.bounds)
            updated[a] = (x, y)
        current = updated

    return current


def clamp_point(point: Point, bounds: Bounds) -> Point:
    min_x, min_y, max_x, max_y = bounds
    x, y = point
    return (min(max(x, min_x), max_x), min(max(y, min_y), max_y))
