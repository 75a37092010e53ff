from PySide6.QtCore import QPointF, QSize, Qt, Slot
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QWidget

from easel.commands.canvas_input_handler import CanvasInputHandler


class Canvas(QWidget):
    """The drawing surface. Repaints the whole scene on every update."""

    def __init__(self, app, parent=None):
        super().__init__(parent)
        self.app = app
        self.machine = app.machine
        self.scene = app.scene
        self.renderer = app.renderer
        self.input_handler = CanvasInputHandler(self)
        self.background_color = QColor(app.settings_controller.canvas_background)
        self.dragging = False
        self.x_offset = 0.0
        self.y_offset = 0.0
        self.last_point = QPointF()
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(self.machine.current_tool.cursor_shape)

        self.machine.render_requested.connect(self.update)
        self.machine.handle_hovered.connect(self.input_handler.on_handle_hovered)
        self.scene.image_decoded.connect(self.update)
        self.scene.changed.connect(self.update)
        self.app.drawing_context.tool_changed.connect(self.on_tool_changed)

    def sizeHint(self):
        width, height = self.app.canvas_size
        return QSize(width, height)

    def get_doc_coords(self, canvas_pos: QPointF) -> QPointF:
        return QPointF(canvas_pos.x() - self.x_offset, canvas_pos.y() - self.y_offset)

    def get_canvas_coords(self, doc_pos: QPointF) -> QPointF:
        return QPointF(doc_pos.x() + self.x_offset, doc_pos.y() + self.y_offset)

    @Slot(str)
    def on_tool_changed(self, tool_name):
        self.setCursor(self.machine.current_tool.cursor_shape)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self.background_color)
        painter.translate(self.x_offset, self.y_offset)
        self.renderer.paint(painter, self.scene.objects, self.scene.selection)
        painter.end()

    def keyPressEvent(self, event):
        if not self.input_handler.keyPressEvent(event):
            super().keyPressEvent(event)

    def mousePressEvent(self, event):
        self.setFocus()
        self.input_handler.mousePressEvent(event)

    def mouseMoveEvent(self, event):
        self.input_handler.mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        self.input_handler.mouseReleaseEvent(event)
