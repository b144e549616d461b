"""
LayoutEngine - position referral graph nodes on a 2D canvas.

Two interchangeable strategies:
- Hierarchical: one horizontal band per generation, siblings grouped under
  their referrer, followed by a few gentle correction passes.
- Circular: first generation near the center, later generations on
  concentric rings, followed by full force relaxation.

Both are deterministic for a given graph and canvas size; every coordinate
is clamped inside the canvas minus the configured margin.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..domain.enums import LayoutMode
from ..domain.models import Graph, Point
from .forces import ForceParams, relax, clamp_point

logger = logging.getLogger(__name__)


@dataclass
class HierarchicalParams:
    """Tuning for the hierarchical layout."""
    root_margin: float = 100.0
    level_margin: float = 80.0
    min_spacing: float = 120.0
    correction_passes: int = 3
    repulsion: float = 800.0
    repulsion_range: float = 120.0
    band_pull: float = 2.0
    step_x: float = 0.001
    step_y: float = 0.02
    bounds_margin: float = 50.0


@dataclass
class CircularParams:
    """Tuning for the circular layout."""
    root_spacing: float = 100.0
    base_radius: float = 100.0
    radius_increment: float = 80.0
    relaxation_passes: int = 20
    repulsion: float = 2000.0
    attraction: float = 0.1
    damping: float = 0.9
    step: float = 0.01
    bounds_margin: float = 50.0


class LayoutStrategy(ABC):
    """A way of placing every node of a graph."""

    @abstractmethod
    def place(self, graph: Graph, width: float, height: float) -> Dict[str, Point]:
        """Return a position for every node id; the graph is not modified."""
        pass

    @staticmethod
    def _bounds(width: float, height: float, margin: float) -> Tuple[float, float, float, float]:
        return (margin, margin, max(margin, width - margin), max(margin, height - margin))


class HierarchicalLayout(LayoutStrategy):
    """Generations stacked top to bottom."""

    def __init__(self, params: Optional[HierarchicalParams] = None):
        self.params = params or HierarchicalParams()

    def place(self, graph: Graph, width: float, height: float) -> Dict[str, Point]:
        p = self.params
        levels = graph.levels()
        level_height = height / (graph.max_level + 2)
        band_y = {level: level_height * (level + 1) for level in levels}

        placed: Dict[str, Point] = {}
        for level, nodes in levels.items():
            y = band_y[level]
            if level == 0:
                if len(nodes) == 1:
                    placed[nodes[0].id] = (width / 2, y)
                    continue
                usable = width - 2 * p.root_margin
                for i, node in enumerate(nodes):
                    placed[node.id] = (p.root_margin + i * usable / (len(nodes) - 1), y)
                continue

            # Group siblings under their referrer; unplaced referrers sort last
            def parent_x(node):
                parent = placed.get(node.parent_id) if node.parent_id else None
                return parent[0] if parent is not None else math.inf

            ordered = sorted(nodes, key=parent_x)
            available = width - 2 * p.level_margin
            spacing = max(p.min_spacing, available / (len(ordered) + 1))
            for i, node in enumerate(ordered):
                x = p.level_margin + spacing * (i + 1)
                x = min(max(x, p.level_margin), width - p.level_margin)
                placed[node.id] = (x, y)

        bounds = self._bounds(width, height, p.bounds_margin)
        params = ForceParams(
            passes=p.correction_passes,
            repulsion=p.repulsion,
            inverse_square=False,
            cutoff=p.repulsion_range,
            same_level_only=True,
            horizontal_only=True,
            band_pull=p.band_pull,
            step_x=p.step_x,
            step_y=p.step_y,
            bounds=bounds,
        )
        return relax(
            placed,
            params,
            levels={node.id: node.level for node in graph},
            band_targets={node.id: band_y[node.level] for node in graph},
        )


class CircularLayout(LayoutStrategy):
    """Generations on concentric rings around the first generation."""

    def __init__(self, params: Optional[CircularParams] = None):
        self.params = params or CircularParams()

    def place(self, graph: Graph, width: float, height: float) -> Dict[str, Point]:
        p = self.params
        cx, cy = width / 2, height / 2
        levels = graph.levels()

        # Shrink the rings when the outermost one would leave the canvas
        outer = p.base_radius + graph.max_level * p.radius_increment
        fit = min(width, height) / 2 - p.bounds_margin
        scale = fit / outer if 0 < fit < outer else 1.0

        placed: Dict[str, Point] = {}
        for level, nodes in levels.items():
            count = len(nodes)
            if level == 0:
                for i, node in enumerate(nodes):
                    placed[node.id] = (cx + (i - (count - 1) / 2) * p.root_spacing, cy)
                continue
            radius = (p.base_radius + level * p.radius_increment) * scale
            for i, node in enumerate(nodes):
                angle = i * 2 * math.pi / count if count > 1 else 0.0
                placed[node.id] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))

        step = p.damping * p.step
        params = ForceParams(
            passes=p.relaxation_passes,
            repulsion=p.repulsion,
            inverse_square=True,
            attraction=p.attraction,
            step_x=step,
            step_y=step,
            bounds=self._bounds(width, height, p.bounds_margin),
        )
        return relax(placed, params, adjacency=graph.adjacency)


class LayoutEngine:
    """
    Computes node positions for a layout mode and canvas size.

    Non-positive canvas extents fall back to the configured default size.
    """

    def __init__(
        self,
        hierarchical: Optional[HierarchicalParams] = None,
        circular: Optional[CircularParams] = None,
        fallback_size: Tuple[float, float] = (800.0, 600.0),
    ):
        self.hierarchical = HierarchicalLayout(hierarchical)
        self.circular = CircularLayout(circular)
        self.fallback_size = fallback_size

    def strategy_for(self, mode: LayoutMode) -> LayoutStrategy:
        if LayoutMode(mode) is LayoutMode.CIRCULAR:
            return self.circular
        return self.hierarchical

    def compute(
        self, graph: Graph, mode: LayoutMode, width: float, height: float
    ) -> Dict[str, Point]:
        """Positions for every node without touching the graph."""
        if graph.is_empty:
            return {}
        if width <= 0 or height <= 0:
            logger.debug(f"Canvas {width}x{height} unusable, laying out at {self.fallback_size}")
            width, height = self.fallback_size

        strategy = self.strategy_for(mode)
        positions = strategy.place(graph, width, height)
        margin = strategy.params.bounds_margin
        bounds = LayoutStrategy._bounds(width, height, margin)
        return {node_id: clamp_point(pos, bounds) for node_id, pos in positions.items()}

    def apply(
        self, graph: Graph, mode: LayoutMode, width: float, height: float
    ) -> Dict[str, Point]:
        """Compute positions and write them onto the graph's nodes."""
        positions = self.compute(graph, mode, width, height)
        graph.set_positions(positions)
        return positions
