"""Export the board to JSON, standalone HTML, PNG and PDF files."""

from __future__ import annotations

import html
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from PySide6.QtCore import QMarginsF, QRect, QSizeF
from PySide6.QtGui import QImage, QPageSize, QPainter, QPdfWriter

from easel.core.geometry import normalize
from easel.core.renderer import SceneRenderer
from easel.core.scene_object import (
    ObjectKind,
    SceneObject,
    ShapeObject,
    TextObject,
    to_record,
)


logger = logging.getLogger(__name__)

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Easel Export</title>
<style>
body {{ margin: 0; background: #f4f4f9; display: flex; justify-content: center; align-items: center; min-height: 100vh; font-family: sans-serif; }}
.canvas-preview {{ position: relative; width: {width}px; height: {height}px; background: white; box-shadow: 0 10px 30px rgba(0,0,0,0.1); overflow: hidden; }}
.obj {{ position: absolute; box-sizing: border-box; }}
</style>
</head>
<body>
<div class="canvas-preview">
{elements}
</div>
</body>
</html>
"""


def _number(value: float) -> str:
    return f"{value:g}"


def _css(value: str) -> str:
    return html.escape(str(value), quote=True)


def export_json(objects: Sequence[SceneObject], path: str | Path) -> None:
    records = [to_record(obj) for obj in objects]
    Path(path).write_text(json.dumps(records, indent=2), encoding="utf-8")
    logger.info("Exported %d object(s) to %s", len(records), path)


def _shape_element(obj: ShapeObject, rounded: bool) -> str:
    box = normalize(obj)
    radius = " border-radius:50%;" if rounded else ""
    return (
        f'<div class="obj" style="left:{_number(box.left)}px; top:{_number(box.top)}px; '
        f"width:{_number(box.width)}px; height:{_number(box.height)}px; "
        f"background:{_css(obj.fill_color)}; border:2px solid {_css(obj.stroke_color)};{radius} "
        "display:flex; align-items:center; justify-content:center; "
        f'color:{_css(obj.effective_label_color)}; font-weight:bold;">'
        f"{html.escape(obj.label)}</div>"
    )


def _text_element(obj: TextObject) -> str:
    return (
        f'<div class="obj" style="left:{_number(obj.x)}px; top:{_number(obj.y)}px; '
        f"color:{_css(obj.text_color)}; font-size:{obj.font_size}px; "
        f"font-family:{_css(obj.font_family)}; white-space:nowrap;\">"
        f"{html.escape(obj.text)}</div>"
    )


def build_html(objects: Sequence[SceneObject], width: int, height: int) -> str:
    """Return a standalone page with one positioned element per rectangle,
    ellipse and text object. Other kinds are not represented."""

    elements = []
    for obj in objects:
        if obj.kind is ObjectKind.RECTANGLE:
            elements.append(_shape_element(obj, rounded=False))
        elif obj.kind is ObjectKind.ELLIPSE:
            elements.append(_shape_element(obj, rounded=True))
        elif obj.kind is ObjectKind.TEXT:
            elements.append(_text_element(obj))
    return HTML_TEMPLATE.format(
        width=int(width), height=int(height), elements="\n".join(elements)
    )


def export_html(objects: Sequence[SceneObject], path: str | Path, width: int, height: int) -> None:
    Path(path).write_text(build_html(objects, width, height), encoding="utf-8")
    logger.info("Exported HTML preview to %s", path)


def export_png(image: QImage, path: str | Path) -> bool:
    if not image.save(str(path), "PNG"):
        logger.error("Could not write PNG to %s", path)
        return False
    return True


def export_pdf(image: QImage, path: str | Path) -> None:
    """Write a single page PDF sized to *image*, with the image at the origin."""

    width, height = image.width(), image.height()
    writer = QPdfWriter(str(path))
    # At 72 dpi one point equals one pixel.
    writer.setResolution(72)
    writer.setPageSize(QPageSize(QSizeF(width, height), QPageSize.Unit.Point))
    writer.setPageMargins(QMarginsF(0, 0, 0, 0))

    painter = QPainter(writer)
    try:
        painter.drawImage(QRect(0, 0, width, height), image)
    finally:
        painter.end()
    logger.info("Exported PDF to %s", path)


def render_for_export(
    objects: Sequence[SceneObject],
    width: int,
    height: int,
    background: str,
    renderer: SceneRenderer | None = None,
) -> QImage:
    renderer = renderer if renderer is not None else SceneRenderer()
    return renderer.render_image(objects, width, height, background)
