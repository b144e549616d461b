"""
Renderer - draw one frame of the referral network.

The renderer is stateless: every frame is a function of a RenderScene
(graph, positions, viewport, interaction state, highlights, analytics
mode). It never modifies the graph or the interaction state, so the same
paint routine serves the on-screen canvas and file export.

All widths and sizes in graph space are divided by zoom, so they stay
constant on screen.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from PyQt6.QtCore import Qt, QPointF, QRectF
from PyQt6.QtGui import (
    QBrush, QColor, QImage, QLinearGradient, QPainter, QPainterPath,
    QPen, QPaintDevice, QRadialGradient,
)

from referral_core.domain.enums import AnalyticsMode, LayoutMode
from referral_core.domain.models import Graph, InteractionState, Node, Point, ViewportState
from referral_core.services.geometry import render_radius

from .style_manager import LODLevel, StyleManager

logger = logging.getLogger(__name__)


class RenderUnavailable(RuntimeError):
    """No usable drawing surface (zero size or a painter that cannot start)."""


@dataclass
class RenderScene:
    """Everything one frame depends on."""
    graph: Graph
    viewport: ViewportState = field(default_factory=ViewportState)
    interaction: InteractionState = field(default_factory=InteractionState)
    positions: Optional[Dict[str, Point]] = None   # None = node positions
    highlights: Set[str] = field(default_factory=set)
    analytics_mode: AnalyticsMode = AnalyticsMode.METRICS
    heatmap: Dict[str, float] = field(default_factory=dict)
    layout_mode: LayoutMode = LayoutMode.HIERARCHICAL
    show_labels: bool = True

    def position_of(self, node: Node) -> Point:
        if self.positions is not None and node.id in self.positions:
            return self.positions[node.id]
        return node.position


class Renderer:
    """Paints RenderScenes with QPainter."""

    EMPTY_TEXT = "No clients to display"
    ARROW_POSITION = 0.7   # Fraction along the edge
    ARROW_SIZE = 6.0

    def __init__(self, style_manager: Optional[StyleManager] = None):
        self.styles = style_manager or StyleManager()

    @staticmethod
    def can_render(width: float, height: float) -> bool:
        return width > 0 and height > 0

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def render(
        self, scene: RenderScene, width: int, height: int, device_pixel_ratio: float = 1.0
    ) -> QImage:
        """
        Render to a new image whose backing buffer is scaled by device_pixel_ratio.

        Raises:
            RenderUnavailable: non-positive size, or the painter could not start
        """
        if not self.can_render(width, height) or device_pixel_ratio <= 0:
            raise RenderUnavailable(f"Cannot render a {width}x{height} frame")

        image = QImage(
            max(1, int(width * device_pixel_ratio)),
            max(1, int(height * device_pixel_ratio)),
            QImage.Format.Format_ARGB32_Premultiplied,
        )
        image.setDevicePixelRatio(device_pixel_ratio)
        self.paint_on(image, scene, width, height)
        return image

    def paint_on(self, device: QPaintDevice, scene: RenderScene, width: float, height: float) -> None:
        """Open a painter on device and paint the frame."""
        painter = QPainter()
        if not painter.begin(device):
            raise RenderUnavailable("Painter could not begin on the target surface")
        try:
            self.paint(painter, scene, width, height)
        finally:
            painter.end()

    def paint(self, painter: QPainter, scene: RenderScene, width: float, height: float) -> None:
        """Paint a frame with an already active painter (logical pixels)."""
        style = self.styles.style
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(QRectF(0, 0, width, height), style.bg_color)

        graph = scene.graph
        if graph.is_empty:
            painter.setPen(QPen(self.styles.with_alpha(style.fg_color, 0.6)))
            painter.setFont(self.styles.font(style.label_font_px))
            painter.drawText(QRectF(0, 0, width, height), Qt.AlignmentFlag.AlignCenter, self.EMPTY_TEXT)
            return

        vp = scene.viewport
        zoom = vp.zoom
        painter.save()
        painter.translate(vp.pan_x, vp.pan_y)
        painter.scale(zoom, zoom)

        if scene.layout_mode == LayoutMode.HIERARCHICAL and self.styles.show_details(zoom):
            self._draw_level_guides(painter, graph, width, height, zoom)

        self._draw_edges(painter, scene, zoom)
        self._draw_nodes(painter, scene, zoom)

        if scene.show_labels and self.styles.show_details(zoom):
            self._draw_labels(painter, scene, zoom)

        painter.restore()

        # Zoom indicator (screen space)
        if zoom != 1.0:
            painter.setPen(QPen(self.styles.with_alpha(style.fg_color, 0.4)))
            painter.setFont(self.styles.font(style.small_font_px))
            painter.drawText(QPointF(10, height - 10), f"Zoom: {zoom:.0%}")

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def _draw_level_guides(self, painter: QPainter, graph: Graph, width: float, height: float, zoom: float):
        style = self.styles.style
        level_height = height / (graph.max_level + 2)
        show_text = self.styles.show_level_labels(zoom)

        for level in graph.levels():
            y = level_height * (level + 1)
            if level == 0:
                pen = QPen(self.styles.with_alpha(style.accent_color, 0.2), 2 / zoom)
            else:
                pen = QPen(self.styles.with_alpha(style.fg_color, 0.1), 1 / zoom)
                pen.setStyle(Qt.PenStyle.DashLine)
            painter.setPen(pen)
            painter.drawLine(QPointF(0, y), QPointF(width, y))

            if show_text:
                painter.setPen(QPen(self.styles.with_alpha(style.fg_color, 0.5)))
                painter.setFont(self.styles.font(style.level_font_px, zoom))
                painter.drawText(QPointF(10 / zoom, y - 5 / zoom), self.styles.level_label(level))

    def _draw_edges(self, painter: QPainter, scene: RenderScene, zoom: float):
        style = self.styles.style
        graph = scene.graph
        max_level = graph.max_level
        focus = {scene.interaction.selected_id, scene.interaction.hovered_id} - {None}
        arrows = self.styles.show_arrows(zoom)

        for parent_id, child_id in graph.directed_edges():
            parent = graph.nodes[parent_id]
            child = graph.nodes[child_id]
            p1 = QPointF(*scene.position_of(parent))
            p2 = QPointF(*scene.position_of(child))
            highlighted = (
                parent_id in focus
                or child_id in focus
                or (parent_id in scene.highlights and child_id in scene.highlights)
            )

            if highlighted:
                # Soft halo under the line
                painter.setOpacity(1.0)
                painter.setPen(QPen(self.styles.with_alpha(style.accent_color, 0.12), 4 / zoom))
                painter.drawLine(p1, p2)

            gradient = QLinearGradient(p1, p2)
            gradient.setColorAt(0.0, self.styles.level_color(parent.level, max_level))
            gradient.setColorAt(1.0, self.styles.level_color(child.level, max_level))
            pen = QPen(QBrush(gradient), (1.5 if highlighted else 0.6) / zoom)
            pen.setCapStyle(Qt.PenCapStyle.RoundCap)
            painter.setOpacity(0.8 if highlighted else 0.45)
            painter.setPen(pen)
            painter.drawLine(p1, p2)

            if arrows:
                self._draw_arrow(painter, p1, p2, self.styles.level_color(child.level, max_level), zoom)

        painter.setOpacity(1.0)

    def _draw_arrow(self, painter: QPainter, p1: QPointF, p2: QPointF, color: QColor, zoom: float):
        dx = p2.x() - p1.x()
        dy = p2.y() - p1.y()
        if dx == 0 and dy == 0:
            return
        angle = math.atan2(dy, dx)
        tip = QPointF(p1.x() + dx * self.ARROW_POSITION, p1.y() + dy * self.ARROW_POSITION)
        size = self.ARROW_SIZE / zoom

        path = QPainterPath()
        path.moveTo(tip)
        path.lineTo(tip.x() - size * math.cos(angle - math.pi / 6),
                    tip.y() - size * math.sin(angle - math.pi / 6))
        path.lineTo(tip.x() - size * math.cos(angle + math.pi / 6),
                    tip.y() - size * math.sin(angle + math.pi / 6))
        path.closeSubpath()

        painter.setPen(Qt.PenStyle.NoPen)
        painter.fillPath(path, QBrush(color))

    def _node_color(self, scene: RenderScene, node: Node, max_level: int) -> QColor:
        if scene.analytics_mode == AnalyticsMode.HEATMAP:
            return self.styles.heatmap_color(scene.heatmap.get(node.id, 0.0))
        if node.id in scene.highlights:
            return self.styles.style.highlight_color
        return self.styles.level_color(node.level, max_level)

    def _draw_nodes(self, painter: QPainter, scene: RenderScene, zoom: float):
        style = self.styles.style
        graph = scene.graph
        max_level = graph.max_level
        lod = self.styles.lod_for_zoom(zoom)
        selected = scene.interaction.selected_id

        for node in graph:
            x, y = scene.position_of(node)
            center = QPointF(x, y)
            radius = render_radius(node.level, node.indication_count, zoom)
            color = self._node_color(scene, node, max_level)
            emphasized = node.id == selected or node.id in scene.highlights

            if lod is LODLevel.HIGH or emphasized:
                self._draw_glow(painter, center, radius, color, 1.5 if emphasized else 1.0)

            painter.setPen(Qt.PenStyle.NoPen)
            if lod is LODLevel.LOW:
                painter.setBrush(QBrush(color))
            else:
                fill = QRadialGradient(QPointF(x - radius * 0.3, y - radius * 0.3), radius * 1.2)
                fill.setColorAt(0.0, color.lighter(130))
                fill.setColorAt(1.0, color)
                painter.setBrush(QBrush(fill))
            painter.drawEllipse(center, radius, radius)

            if node.ltv > 0:
                painter.setBrush(QBrush(self.styles.with_alpha(QColor(255, 255, 255), 0.35)))
                painter.drawEllipse(center, radius * 0.6, radius * 0.6)

            if node.id == selected:
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.setPen(QPen(style.selection_color, 2 / zoom))
                painter.drawEllipse(center, radius + 2 / zoom, radius + 2 / zoom)

    def _draw_glow(self, painter: QPainter, center: QPointF, radius: float, color: QColor, intensity: float):
        """Three-layer halo: wide soft glow, tighter glow, bright core."""
        painter.setPen(Qt.PenStyle.NoPen)
        layers = (
            (1.3, color, 0.15),
            (0.75, color, 0.25),
            (0.3, QColor(255, 255, 255), 0.3),
        )
        for spread, layer_color, alpha in layers:
            extent = radius * (1 + spread * intensity)
            glow = QRadialGradient(center, extent)
            glow.setColorAt(0.0, self.styles.with_alpha(layer_color, alpha * intensity))
            glow.setColorAt(1.0, self.styles.with_alpha(layer_color, 0.0))
            painter.setBrush(QBrush(glow))
            painter.drawEllipse(center, extent, extent)

    def _draw_labels(self, painter: QPainter, scene: RenderScene, zoom: float):
        """Name above and indication count below, for hovered and selected nodes only."""
        style = self.styles.style
        ids = []
        for node_id in (scene.interaction.hovered_id, scene.interaction.selected_id):
            if node_id is not None and node_id not in ids and node_id in scene.graph:
                ids.append(node_id)

        for node_id in ids:
            node = scene.graph.nodes[node_id]
            x, y = scene.position_of(node)
            radius = render_radius(node.level, node.indication_count, zoom)
            first_name = node.name.split()[0] if node.name.split() else node.name

            painter.setPen(QPen(style.fg_color))
            painter.setFont(self.styles.font(style.label_font_px, zoom, bold=True))
            self._draw_centered(painter, x, y - radius - 10 / zoom, first_name)

            if self.styles.show_indication_label(zoom):
                painter.setPen(QPen(self.styles.with_alpha(style.fg_color, 0.7)))
                painter.setFont(self.styles.font(style.small_font_px, zoom))
                self._draw_centered(
                    painter, x, y + radius + 14 / zoom, f"{node.indication_count} indications"
                )

    @staticmethod
    def _draw_centered(painter: QPainter, x: float, baseline: float, text: str):
        width = painter.fontMetrics().horizontalAdvance(text)
        painter.drawText(QPointF(x - width / 2, baseline), text)
