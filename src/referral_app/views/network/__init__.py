"""
Referral network view: renderer, canvas widget, styling and export.
"""

from .style_manager import StyleManager, NetworkStyle, LODLevel
from .renderer import Renderer, RenderScene, RenderUnavailable
from .canvas import NetworkCanvas
from .export import export_png, export_svg, export_pdf

__all__ = [
    "StyleManager",
    "NetworkStyle",
    "LODLevel",
    "Renderer",
    "RenderScene",
    "RenderUnavailable",
    "NetworkCanvas",
    "export_png",
    "export_svg",
    "export_pdf",
]
