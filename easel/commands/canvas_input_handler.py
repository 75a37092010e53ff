from __future__ import annotations

from PySide6.QtCore import Qt

from easel.core.geometry import Handle
from easel.core.interaction import KEY_BACKSPACE, KEY_DELETE

HANDLE_CURSORS = {
    Handle.TOP_LEFT: Qt.SizeFDiagCursor,
    Handle.BOTTOM_RIGHT: Qt.SizeFDiagCursor,
    Handle.TOP_RIGHT: Qt.SizeBDiagCursor,
    Handle.BOTTOM_LEFT: Qt.SizeBDiagCursor,
    Handle.TOP_CENTER: Qt.SizeVerCursor,
}


class CanvasInputHandler:
    """Translates Qt input events on the canvas into state machine calls.

    The left button drives the board; the middle button pans the view.
    """

    def __init__(self, canvas):
        self.canvas = canvas

    @property
    def machine(self):
        return self.canvas.machine

    def keyPressEvent(self, event) -> bool:
        key = event.key()
        ctrl = bool(event.modifiers() & Qt.ControlModifier)
        if key == Qt.Key_Delete:
            name = KEY_DELETE
        elif key == Qt.Key_Backspace:
            name = KEY_BACKSPACE
        elif ctrl and key == Qt.Key_Z:
            name = "z"
        else:
            name = event.text()
            if len(name) != 1:
                return False
        return self.machine.key_press(name, ctrl=ctrl)

    def mousePressEvent(self, event):
        if event.button() == Qt.MiddleButton:
            self.canvas.dragging = True
            self.canvas.last_point = event.position()
            return
        if event.button() != Qt.LeftButton:
            return
        pos = self.canvas.get_doc_coords(event.position())
        additive = bool(event.modifiers() & Qt.ShiftModifier)
        self.machine.pointer_down(pos.x(), pos.y(), additive=additive)

    def mouseMoveEvent(self, event):
        if (event.buttons() & Qt.MiddleButton) and self.canvas.dragging:
            delta = event.position() - self.canvas.last_point
            self.canvas.x_offset += delta.x()
            self.canvas.y_offset += delta.y()
            self.canvas.last_point = event.position()
            self.canvas.update()
            return
        pos = self.canvas.get_doc_coords(event.position())
        self.machine.pointer_move(pos.x(), pos.y())

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MiddleButton:
            self.canvas.dragging = False
            return
        if event.button() != Qt.LeftButton:
            return
        pos = self.canvas.get_doc_coords(event.position())
        self.machine.pointer_up(pos.x(), pos.y())

    def on_handle_hovered(self, handle):
        if handle is None:
            self.canvas.setCursor(self.machine.current_tool.cursor_shape)
        else:
            self.canvas.setCursor(HANDLE_CURSORS[handle])
