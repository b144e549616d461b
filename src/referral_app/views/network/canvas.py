"""
Network Canvas - interactive referral graph widget.

Paints frames through the Renderer and drives layout transitions with a
16 ms QTimer. Pointer events are forwarded to the NetworkVM, which owns
pan/zoom/selection state.
"""

import logging
from typing import Dict, Optional

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt, QTimer, QRectF
from PyQt6.QtGui import QPainter, QPen, QColor

from referral_core.domain.enums import LayoutMode
from referral_core.domain.models import Point
from referral_core.services.transition import TransitionAnimator

from ...viewmodels.network_vm import NetworkVM
from .renderer import Renderer, RenderScene, RenderUnavailable
from .style_manager import StyleManager

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16


class NetworkCanvas(QWidget):
    """QWidget that shows the referral network of a NetworkVM."""

    def __init__(self, vm: NetworkVM, parent=None, renderer: Optional[Renderer] = None):
        super().__init__(parent)
        self._vm = vm
        self._renderer = renderer or Renderer(StyleManager())
        self._animator = TransitionAnimator(vm.settings.animation_duration_ms)
        self._laid_out_mode: Optional[LayoutMode] = None

        self._timer = QTimer(self)
        self._timer.setInterval(FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self._on_frame)

        self.setMouseTracking(True)
        self.setMinimumSize(400, 300)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        # Bind
        vm.graph_changed.connect(self._on_graph_changed)
        vm.settings_changed.connect(self._on_settings_changed)
        vm.highlights_changed.connect(self.update)
        vm.analytics_changed.connect(self.update)
        vm.viewport_changed.connect(self.update)
        vm.selection_changed.connect(lambda _id: self.update())
        vm.hover_changed.connect(lambda _id: self.update())

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def animator(self) -> TransitionAnimator:
        return self._animator

    @property
    def is_animating(self) -> bool:
        return self._timer.isActive()

    def current_positions(self) -> Dict[str, Point]:
        """Positions on screen right now (mid-transition if animating)."""
        return self._animator.positions_at()

    def current_scene(self) -> RenderScene:
        vm = self._vm
        return RenderScene(
            graph=vm.graph,
            viewport=vm.interaction.viewport,
            interaction=vm.interaction.state,
            positions=self.current_positions(),
            highlights=vm.highlights,
            analytics_mode=vm.settings.analytics_mode,
            heatmap=vm.analytics.heatmap,
            layout_mode=vm.settings.layout_mode,
            show_labels=vm.settings.show_labels,
        )

    # -------------------------------------------------------------------------
    # Layout & animation
    # -------------------------------------------------------------------------

    def relayout(self, animate: bool = True) -> None:
        """Compute target positions and transition (or snap) to them."""
        target = self._vm.compute_layout(self.width(), self.height())
        self._laid_out_mode = self._vm.settings.layout_mode
        self._animator.duration_ms = self._vm.settings.animation_duration_ms

        if animate:
            self._animator.start(target)
        else:
            self._animator.snap(target)

        if self._animator.is_running:
            if not self._timer.isActive():
                self._timer.start()
        else:
            self._timer.stop()
            self._vm.graph.set_positions(target)
        self.update()

    def stop_animation(self) -> None:
        """Cancel the loop; no further frame callbacks touch state."""
        self._timer.stop()
        self._animator.cancel()

    def _on_frame(self):
        if not self._animator.tick():
            self._timer.stop()
            self._vm.graph.set_positions(self._animator.committed)
        self.update()

    def _on_graph_changed(self):
        self.relayout(animate=True)

    def _on_settings_changed(self):
        self._animator.duration_ms = self._vm.settings.animation_duration_ms
        if self._vm.settings.layout_mode != self._laid_out_mode:
            self.relayout(animate=True)
        else:
            self.update()

    # -------------------------------------------------------------------------
    # Qt events
    # -------------------------------------------------------------------------

    def paintEvent(self, event):
        """Paint the current frame."""
        painter = QPainter(self)
        width, height = self.width(), self.height()
        try:
            image = self._renderer.render(
                self.current_scene(), width, height, self.devicePixelRatioF()
            )
        except RenderUnavailable as e:
            logger.debug(f"Skipping frame: {e}")
            painter.fillRect(self.rect(), QColor(8, 12, 24))
            painter.setPen(QPen(QColor(229, 231, 235)))
            painter.drawText(QRectF(self.rect()), Qt.AlignmentFlag.AlignCenter, "Canvas unavailable")
        else:
            painter.drawImage(0, 0, image)
        painter.end()

    def resizeEvent(self, event):
        """Re-layout to the new size without animating."""
        super().resizeEvent(event)
        self._vm.set_canvas_size(self.width(), self.height())
        if not self._vm.graph.is_empty:
            self.relayout(animate=False)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self._vm.press(pos.x(), pos.y())
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        pos = event.position()
        if self._vm.interaction.state.dragging:
            self._vm.drag(pos.x(), pos.y())
        else:
            self._vm.hover_at(pos.x(), pos.y(), self.current_positions())
            cursor = Qt.CursorShape.PointingHandCursor if self._vm.hovered_id else Qt.CursorShape.ArrowCursor
            self.setCursor(cursor)
        event.accept()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self._vm.release(pos.x(), pos.y(), self.current_positions())
            self.setCursor(Qt.CursorShape.ArrowCursor)
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event):
        """Zoom by one step per wheel notch, centered on the canvas."""
        self._vm.wheel(event.angleDelta().y())
        event.accept()

    def closeEvent(self, event):
        self.stop_animation()
        super().closeEvent(event)

    def hideEvent(self, event):
        """Jump to the end of any transition while hidden."""
        self._timer.stop()
        self._animator.finish()
        self._vm.graph.set_positions(self._animator.committed)
        super().hideEvent(event)
