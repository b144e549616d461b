"""
Style manager for the referral network view.

Centralizes colors, level-of-detail thresholds and label text.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from PyQt6.QtGui import QColor, QFont


class LODLevel(Enum):
    """Level of detail bands by zoom."""
    LOW = 0       # Flat fills only (zoom <= 0.4)
    MEDIUM = 1    # Gradient fills (0.4 - 0.8)
    HIGH = 2      # Glow halos on every node (zoom > 0.8)


@dataclass
class NetworkStyle:
    """All styling parameters for the network view."""

    bg_color: QColor = field(default_factory=lambda: QColor(8, 12, 24))
    fg_color: QColor = field(default_factory=lambda: QColor(229, 231, 235))
    accent_color: QColor = field(default_factory=lambda: QColor(139, 92, 246))  # Violet

    highlight_color: QColor = field(default_factory=lambda: QColor(251, 191, 36))  # Amber
    selection_color: QColor = field(default_factory=lambda: QColor(255, 255, 255))

    font_family: str = "Segoe UI"
    label_font_px: float = 12.0
    small_font_px: float = 10.0
    level_font_px: float = 11.0


class StyleManager:
    """Colors and level-of-detail rules for the renderer."""

    # Zoom thresholds
    HIGH_QUALITY_ZOOM = 0.8     # Glow halos everywhere
    MEDIUM_QUALITY_ZOOM = 0.4   # Gradient node fills
    DETAILS_ZOOM = 0.3          # Level guides, hover/selection labels
    LEVEL_LABEL_ZOOM = 0.5      # Text next to level guides
    INDICATION_LABEL_ZOOM = 0.4 # "N indications" under the label
    ARROW_ZOOM = 1.0            # Direction arrows on edges

    # Levels below this count still get the full gradient range
    MIN_GRADIENT_LEVELS = 4

    def __init__(self, style: Optional[NetworkStyle] = None):
        self.style = style or NetworkStyle()

    # -------------------------------------------------------------------------
    # Level of detail
    # -------------------------------------------------------------------------

    def lod_for_zoom(self, zoom: float) -> LODLevel:
        if zoom > self.HIGH_QUALITY_ZOOM:
            return LODLevel.HIGH
        if zoom > self.MEDIUM_QUALITY_ZOOM:
            return LODLevel.MEDIUM
        return LODLevel.LOW

    def show_details(self, zoom: float) -> bool:
        return zoom > self.DETAILS_ZOOM

    def show_level_labels(self, zoom: float) -> bool:
        return zoom > self.LEVEL_LABEL_ZOOM

    def show_arrows(self, zoom: float) -> bool:
        return zoom >= self.ARROW_ZOOM

    def show_indication_label(self, zoom: float) -> bool:
        return zoom > self.INDICATION_LABEL_ZOOM

    # -------------------------------------------------------------------------
    # Colors
    # -------------------------------------------------------------------------

    def level_color(self, level: int, max_level: int) -> QColor:
        """Theme accent lightened towards white for deeper generations."""
        accent = self.style.accent_color
        levels = max(max_level, self.MIN_GRADIENT_LEVELS)
        factor = min(level / levels, 1.0)
        return QColor(
            int(accent.red() + (255 - accent.red()) * factor * 0.4),
            int(accent.green() + (255 - accent.green()) * factor * 0.4),
            int(accent.blue() + (255 - accent.blue()) * factor * 0.2),
        )

    def heatmap_color(self, score: float) -> QColor:
        """Blue (low) to red (high) ramp over a 0-100 score."""
        intensity = min(max(score / 100.0, 0.0), 1.0)
        return QColor(
            int(intensity * 255),
            int((1 - intensity) * 100),
            int((1 - intensity) * 255),
        )

    def with_alpha(self, color: QColor, alpha: float) -> QColor:
        c = QColor(color)
        c.setAlphaF(min(max(alpha, 0.0), 1.0))
        return c

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def font(self, pixel_size: float, zoom: float = 1.0, bold: bool = False) -> QFont:
        """Font whose on-screen size is constant under the given zoom."""
        font = QFont(self.style.font_family)
        font.setPointSizeF(max(pixel_size / zoom, 1.0))
        font.setBold(bold)
        return font

    @staticmethod
    def level_label(level: int) -> str:
        if level == 0:
            return "Level 0 - Root clients"
        return f"Level {level} - {_ordinal(level)} generation"


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
