"""
InteractionController - pointer events to pan, zoom and selection.

Holds the ViewportState and InteractionState consumed by the renderer.
Every handler returns whether something visible changed so the host can
decide to repaint and emit change events.
"""

import logging
import math
from typing import Dict, Optional, Tuple

from ..domain.models import Graph, InteractionState, Point, ViewportState
from .geometry import render_radius

logger = logging.getLogger(__name__)


class InteractionController:
    """Single-selection pan/zoom controller."""

    def __init__(self, min_zoom: float = 0.3, max_zoom: float = 3.0, zoom_step: float = 1.2):
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.zoom_step = zoom_step
        self.viewport = ViewportState()
        self.state = InteractionState()
        self.canvas_size: Tuple[float, float] = (800.0, 600.0)
        self._last_pointer: Optional[Point] = None
        self._press_pointer: Optional[Point] = None

    # -------------------------------------------------------------------------
    # Pan
    # -------------------------------------------------------------------------

    def press(self, sx: float, sy: float) -> None:
        self.state.dragging = True
        self._last_pointer = (sx, sy)
        self._press_pointer = (sx, sy)

    def drag(self, sx: float, sy: float) -> bool:
        """Pan by the raw screen delta since the last pointer event."""
        if not self.state.dragging or self._last_pointer is None:
            return False
        lx, ly = self._last_pointer
        self._last_pointer = (sx, sy)
        dx, dy = sx - lx, sy - ly
        if dx == 0 and dy == 0:
            return False
        self.viewport.pan_x += dx
        self.viewport.pan_y += dy
        return True

    def release(self, sx: float, sy: float) -> bool:
        """
        End a drag.

        Returns:
            True if the pointer did not move since press (the host treats it as a click)
        """
        was_click = self._press_pointer == (sx, sy)
        self.state.dragging = False
        self._last_pointer = None
        self._press_pointer = None
        return was_click

    # -------------------------------------------------------------------------
    # Zoom
    # -------------------------------------------------------------------------

    def set_zoom(self, zoom: float) -> bool:
        """
        Set zoom clamped to the allowed range, keeping the canvas center fixed.
        """
        new_zoom = min(max(zoom, self.min_zoom), self.max_zoom)
        old_zoom = self.viewport.zoom
        if math.isclose(new_zoom, old_zoom):
            return False

        # Graph point under the canvas center stays under it
        cx, cy = self.canvas_size[0] / 2, self.canvas_size[1] / 2
        gx, gy = self.viewport.screen_to_graph(cx, cy)
        self.viewport.zoom = new_zoom
        self.viewport.pan_x = cx - gx * new_zoom
        self.viewport.pan_y = cy - gy * new_zoom
        return True

    def zoom_in(self) -> bool:
        return self.set_zoom(self.viewport.zoom * self.zoom_step)

    def zoom_out(self) -> bool:
        return self.set_zoom(self.viewport.zoom / self.zoom_step)

    def wheel(self, delta: float) -> bool:
        """Wheel zoom; positive delta zooms in. Centered on the canvas like the buttons."""
        if delta > 0:
            return self.zoom_in()
        if delta < 0:
            return self.zoom_out()
        return False

    def reset(self) -> bool:
        """Zoom 1, no pan, nothing selected."""
        changed = (
            self.viewport.zoom != 1.0
            or self.viewport.pan_x != 0.0
            or self.viewport.pan_y != 0.0
            or self.state.selected_id is not None
        )
        self.viewport = ViewportState()
        self.state.selected_id = None
        return changed

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def hit_test(
        self, graph: Graph, sx: float, sy: float, positions: Optional[Dict[str, Point]] = None
    ) -> Optional[str]:
        """
        Node id under a screen point, or None.

        The nearest node whose center is within its render radius wins;
        equal distances go to the earlier node.
        """
        gx, gy = self.viewport.screen_to_graph(sx, sy)
        zoom = self.viewport.zoom
        best_id = None
        best_dist = math.inf
        for node in graph:
            x, y = positions.get(node.id, node.position) if positions else node.position
            dist = math.hypot(gx - x, gy - y)
            if dist <= render_radius(node.level, node.indication_count, zoom) and dist < best_dist:
                best_id = node.id
                best_dist = dist
        return best_id

    def click(
        self, graph: Graph, sx: float, sy: float, positions: Optional[Dict[str, Point]] = None
    ) -> bool:
        """Select the node under the pointer; a miss clears the selection."""
        hit = self.hit_test(graph, sx, sy, positions)
        if hit == self.state.selected_id:
            return False
        self.state.selected_id = hit
        logger.debug(f"Selection -> {hit}")
        return True

    def hover(
        self, graph: Graph, sx: float, sy: float, positions: Optional[Dict[str, Point]] = None
    ) -> bool:
        hit = self.hit_test(graph, sx, sy, positions)
        if hit == self.state.hovered_id:
            return False
        self.state.hovered_id = hit
        return True

    def select(self, node_id: Optional[str]) -> bool:
        if node_id == self.state.selected_id:
            return False
        self.state.selected_id = node_id
        return True

    def forget_missing(self, graph: Graph) -> bool:
        """Drop selection/hover ids that no longer exist after a rebuild."""
        changed = False
        if self.state.selected_id is not None and self.state.selected_id not in graph:
            self.state.selected_id = None
            changed = True
        if self.state.hovered_id is not None and self.state.hovered_id not in graph:
            self.state.hovered_id = None
            changed = True
        return changed
