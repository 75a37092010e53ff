"""Unit tests for :mod:`easel.commands.canvas_input_handler`."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QPointF, Qt

from easel.commands.canvas_input_handler import HANDLE_CURSORS, CanvasInputHandler
from easel.core.geometry import Handle


class FakeKeyEvent:
    """Minimal stand-in for :class:`QKeyEvent`."""

    def __init__(self, key: int, text: str = "", modifiers=Qt.NoModifier):
        self._key = key
        self._text = text
        self._modifiers = modifiers

    def key(self) -> int:
        return self._key

    def text(self) -> str:
        return self._text

    def modifiers(self):
        return self._modifiers


class FakeMouseEvent:
    """Minimal stand-in for :class:`QMouseEvent`."""

    def __init__(self, x, y, button=Qt.LeftButton, buttons=None, modifiers=Qt.NoModifier):
        self._pos = QPointF(x, y)
        self._button = button
        self._buttons = button if buttons is None else buttons
        self._modifiers = modifiers

    def position(self):
        return self._pos

    def button(self):
        return self._button

    def buttons(self):
        return self._buttons

    def modifiers(self):
        return self._modifiers


class RecordingMachine:
    def __init__(self):
        self.calls = []
        self.current_tool = type("Tool", (), {"cursor_shape": Qt.CrossCursor})()

    def key_press(self, key, ctrl=False):
        self.calls.append(("key", key, ctrl))
        return True

    def pointer_down(self, x, y, additive=False):
        self.calls.append(("down", x, y, additive))

    def pointer_move(self, x, y):
        self.calls.append(("move", x, y))

    def pointer_up(self, x=None, y=None):
        self.calls.append(("up", x, y))


class DummyCanvas:
    def __init__(self):
        self.machine = RecordingMachine()
        self.dragging = False
        self.x_offset = 10.0
        self.y_offset = 20.0
        self.last_point = QPointF()
        self.cursor = None
        self.updates = 0

    def get_doc_coords(self, pos):
        return QPointF(pos.x() - self.x_offset, pos.y() - self.y_offset)

    def setCursor(self, cursor):
        self.cursor = cursor

    def update(self):
        self.updates += 1


@pytest.fixture
def canvas() -> DummyCanvas:
    return DummyCanvas()


@pytest.mark.parametrize(
    "event,expected",
    [
        (FakeKeyEvent(Qt.Key_Delete), ("key", "Delete", False)),
        (FakeKeyEvent(Qt.Key_Backspace, "\b"), ("key", "Backspace", False)),
        (FakeKeyEvent(Qt.Key_Z, "\x1a", Qt.ControlModifier), ("key", "z", True)),
        (FakeKeyEvent(Qt.Key_A, "a"), ("key", "a", False)),
    ],
)
def test_keys_are_forwarded_by_name(canvas, event, expected):
    handler = CanvasInputHandler(canvas)
    assert handler.keyPressEvent(event)
    assert canvas.machine.calls == [expected]


def test_keys_without_text_are_not_consumed(canvas):
    handler = CanvasInputHandler(canvas)
    assert handler.keyPressEvent(FakeKeyEvent(Qt.Key_Shift)) is False
    assert canvas.machine.calls == []


def test_left_button_drives_machine_in_document_coordinates(canvas):
    handler = CanvasInputHandler(canvas)
    handler.mousePressEvent(FakeMouseEvent(20, 40, modifiers=Qt.ShiftModifier))
    handler.mouseMoveEvent(FakeMouseEvent(30, 50))
    handler.mouseReleaseEvent(FakeMouseEvent(30, 50))
    assert canvas.machine.calls == [
        ("down", 10, 20, True),
        ("move", 20, 30),
        ("up", 20, 30),
    ]


def test_right_button_is_ignored(canvas):
    handler = CanvasInputHandler(canvas)
    handler.mousePressEvent(FakeMouseEvent(20, 40, button=Qt.RightButton))
    handler.mouseReleaseEvent(FakeMouseEvent(20, 40, button=Qt.RightButton))
    assert canvas.machine.calls == []


def test_middle_button_pans(canvas):
    handler = CanvasInputHandler(canvas)
    handler.mousePressEvent(FakeMouseEvent(100, 100, button=Qt.MiddleButton))
    handler.mouseMoveEvent(FakeMouseEvent(130, 90, button=Qt.NoButton, buttons=Qt.MiddleButton))
    handler.mouseReleaseEvent(FakeMouseEvent(130, 90, button=Qt.MiddleButton))
    assert (canvas.x_offset, canvas.y_offset) == (40, 10)
    assert canvas.dragging is False
    assert canvas.updates == 1
    assert canvas.machine.calls == []


def test_handle_hover_changes_cursor(canvas):
    handler = CanvasInputHandler(canvas)
    handler.on_handle_hovered(Handle.TOP_RIGHT)
    assert canvas.cursor == HANDLE_CURSORS[Handle.TOP_RIGHT]
    handler.on_handle_hovered(None)
    assert canvas.cursor == Qt.CrossCursor
