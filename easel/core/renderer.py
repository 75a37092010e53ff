from __future__ import annotations

from collections.abc import Iterable, Sequence

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QImage, QPainter, QPainterPath, QPen, QPolygonF

from easel.core.geometry import HANDLE_RADIUS, handle_positions, normalize
from easel.core.scene_object import (
    DEFAULT_STROKE,
    FontStyle,
    ObjectKind,
    SceneObject,
    ShapeObject,
    check_exhaustive,
)

SELECTION_COLOR = QColor("#3b82f6")
STROKE_WIDTH = 2
DASH_PATTERN = [5, 5]


def compose_font(family: str, size: int, style: FontStyle) -> QFont:
    """Build the font for text objects: style, weight, pixel size and family."""

    font = QFont(family)
    font.setPixelSize(max(1, int(size)))
    font.setItalic(style is FontStyle.ITALIC)
    font.setBold(style is FontStyle.BOLD)
    return font


class SceneRenderer:
    """Paints a whole scene, bottom to top, on every call."""

    def __init__(self, label_font: QFont | None = None):
        self.label_font = label_font if label_font is not None else compose_font(
            "Arial", 18, FontStyle.NORMAL
        )
        self._painters = check_exhaustive(
            {
                ObjectKind.RECTANGLE: self._paint_rectangle,
                ObjectKind.ELLIPSE: self._paint_ellipse,
                ObjectKind.TRIANGLE: self._paint_triangle,
                ObjectKind.TEXT: self._paint_text,
                ObjectKind.IMAGE: self._paint_image,
                ObjectKind.SKETCH: self._paint_sketch,
            },
            "Renderer table",
        )

    def paint(
        self,
        painter: QPainter,
        objects: Sequence[SceneObject],
        selection: Iterable[SceneObject] = (),
    ) -> None:
        selection = list(selection)
        selected_ids = {id(obj) for obj in selection}
        painter.setRenderHint(QPainter.Antialiasing, True)
        for obj in objects:
            selected = id(obj) in selected_ids
            painter.save()
            painter.setPen(self._outline_pen(obj, selected))
            painter.setBrush(Qt.NoBrush)
            self._painters[obj.kind](painter, obj, selected)
            if isinstance(obj, ShapeObject) and obj.label:
                self._paint_label(painter, obj)
            painter.restore()

        if len(selection) == 1:
            self._paint_handles(painter, selection[0])

    def render_image(
        self,
        objects: Sequence[SceneObject],
        width: int,
        height: int,
        background: QColor | str | None = None,
        selection: Iterable[SceneObject] = (),
    ) -> QImage:
        image = QImage(max(1, int(width)), max(1, int(height)), QImage.Format_ARGB32)
        image.fill(QColor(background) if background is not None else Qt.transparent)
        painter = QPainter(image)
        try:
            self.paint(painter, objects, selection)
        finally:
            painter.end()
        return image

    # ------------------------------------------------------------------
    # Pens and brushes
    # ------------------------------------------------------------------
    @staticmethod
    def _outline_pen(obj: SceneObject, selected: bool) -> QPen:
        if selected:
            pen = QPen(SELECTION_COLOR, STROKE_WIDTH)
            pen.setDashPattern(DASH_PATTERN)
            return pen
        return QPen(QColor(obj.stroke_color or DEFAULT_STROKE), STROKE_WIDTH)

    @staticmethod
    def _apply_fill(painter: QPainter, obj: SceneObject) -> None:
        if obj.has_fill:
            painter.setBrush(QColor(obj.fill_color))

    @staticmethod
    def _box_rect(obj: SceneObject) -> QRectF:
        box = normalize(obj)
        return QRectF(box.left, box.top, box.width, box.height)

    # ------------------------------------------------------------------
    # Per-kind painters
    # ------------------------------------------------------------------
    def _paint_rectangle(self, painter, obj, selected):
        self._apply_fill(painter, obj)
        painter.drawRect(self._box_rect(obj))

    def _paint_ellipse(self, painter, obj, selected):
        self._apply_fill(painter, obj)
        painter.drawEllipse(self._box_rect(obj))

    def _paint_triangle(self, painter, obj, selected):
        self._apply_fill(painter, obj)
        path = QPainterPath()
        path.addPolygon(
            QPolygonF(
                [
                    QPointF(obj.x + obj.w / 2, obj.y),
                    QPointF(obj.x, obj.y + obj.h),
                    QPointF(obj.x + obj.w, obj.y + obj.h),
                ]
            )
        )
        path.closeSubpath()
        painter.drawPath(path)

    def _paint_text(self, painter, obj, selected):
        painter.setFont(compose_font(obj.font_family, obj.font_size, obj.font_style))
        painter.setPen(QColor(obj.text_color))
        painter.drawText(QPointF(obj.x, obj.y), obj.text)
        if selected:
            painter.setPen(self._outline_pen(obj, True))
            painter.drawRect(self._box_rect(obj))

    def _paint_image(self, painter, obj, selected):
        handle = obj.image
        if handle is None or not handle.is_ready:
            return
        target = self._box_rect(obj)
        painter.drawImage(target, handle.image)
        if selected:
            painter.drawRect(target)

    def _paint_sketch(self, painter, obj, selected):
        if len(obj.points) < 2:
            if obj.points:
                painter.drawPoint(QPointF(*obj.points[0]))
            return
        painter.drawPolyline(QPolygonF([QPointF(px, py) for px, py in obj.points]))

    def _paint_label(self, painter, obj: ShapeObject):
        painter.setPen(QColor(obj.effective_label_color))
        painter.setFont(self.label_font)
        center_x = obj.x + obj.w / 2
        center_y = obj.y + obj.h / 2
        if obj.kind is ObjectKind.TRIANGLE:
            center_y += obj.h / 6
        # Large box centered on the anchor so long labels are not clipped.
        area = QRectF(center_x - 1000, center_y - 1000, 2000, 2000)
        painter.drawText(area, Qt.AlignCenter, obj.label)

    def _paint_handles(self, painter: QPainter, obj: SceneObject) -> None:
        positions = handle_positions(obj)
        if not positions:
            return
        painter.save()
        painter.setPen(QPen(SELECTION_COLOR, 1))
        painter.setBrush(SELECTION_COLOR)
        half = HANDLE_RADIUS / 2
        for _, hx, hy in positions:
            painter.drawRect(QRectF(hx - half, hy - half, HANDLE_RADIUS, HANDLE_RADIUS))
        painter.restore()
