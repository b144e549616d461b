"""
Still-image export of the current network frame.

All formats paint through Renderer.paint, so an export looks exactly like
the canvas at the time of the call.
"""

import logging
from pathlib import Path
from typing import Union

from PyQt6.QtCore import QMarginsF, QRectF, QSize, QSizeF
from PyQt6.QtGui import QPageLayout, QPageSize

from .renderer import Renderer, RenderScene, RenderUnavailable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def export_png(
    renderer: Renderer,
    scene: RenderScene,
    path: PathLike,
    width: int,
    height: int,
    device_pixel_ratio: float = 2.0,
) -> bool:
    """Save the frame as PNG at device_pixel_ratio x the logical size."""
    image = renderer.render(scene, width, height, device_pixel_ratio)
    ok = image.save(str(path), "PNG")
    if ok:
        logger.info(f"Exported PNG to {path}")
    else:
        logger.error(f"Could not write PNG to {path}")
    return ok


def export_svg(renderer: Renderer, scene: RenderScene, path: PathLike, width: int, height: int) -> bool:
    """Save the frame as SVG."""
    from PyQt6.QtSvg import QSvgGenerator

    if not renderer.can_render(width, height):
        raise RenderUnavailable(f"Cannot export a {width}x{height} frame")

    generator = QSvgGenerator()
    generator.setFileName(str(path))
    generator.setSize(QSize(int(width), int(height)))
    generator.setViewBox(QRectF(0, 0, width, height))
    generator.setTitle("Referral Network")
    generator.setDescription("Client referral network exported from Referral Network")

    renderer.paint_on(generator, scene, width, height)
    logger.info(f"Exported SVG to {path}")
    return True


def export_pdf(renderer: Renderer, scene: RenderScene, path: PathLike, width: int, height: int) -> bool:
    """Save the frame as a single-page PDF sized to the frame's aspect ratio."""
    from PyQt6.QtGui import QPainter
    from PyQt6.QtPrintSupport import QPrinter

    if not renderer.can_render(width, height):
        raise RenderUnavailable(f"Cannot export a {width}x{height} frame")

    printer = QPrinter(QPrinter.PrinterMode.HighResolution)
    printer.setOutputFormat(QPrinter.OutputFormat.PdfFormat)
    printer.setOutputFileName(str(path))

    # 96 logical px per inch
    page_size = QPageSize(QSizeF(width / 96 * 25.4, height / 96 * 25.4), QPageSize.Unit.Millimeter)
    printer.setPageSize(page_size)
    printer.setPageMargins(QMarginsF(0, 0, 0, 0), QPageLayout.Unit.Millimeter)

    painter = QPainter()
    if not painter.begin(printer):
        raise RenderUnavailable(f"Could not open {path} for PDF output")
    try:
        # Map the logical frame onto the printer's page rectangle
        page = printer.pageRect(QPrinter.Unit.DevicePixel)
        scale = min(page.width() / width, page.height() / height)
        painter.scale(scale, scale)
        renderer.paint(painter, scene, width, height)
    finally:
        painter.end()

    logger.info(f"Exported PDF to {path}")
    return True
