"""Pointer and keyboard gestures turned into scene mutations.

The machine knows nothing about widgets: callers feed it document
coordinates and key names, and repaint when ``render_requested`` fires.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from PySide6.QtCore import QObject, Signal

from easel.core.drawing_context import DrawingContext
from easel.core.document import SceneDocument
from easel.core.geometry import Handle, handle_at
from easel.core.history import HistoryManager
from easel.core.scene_object import LABELLED_KINDS, ImageObject, SceneObject, TextObject
from easel.tools import create_tools
from easel.tools.imagetool import DEFAULT_IMAGE_RECT


logger = logging.getLogger(__name__)

KEY_DELETE = "Delete"
KEY_BACKSPACE = "Backspace"


class InteractionState(Enum):
    IDLE = auto()
    DRAWING = auto()
    DRAGGING = auto()
    RESIZING = auto()


# Each resizer keeps the edges opposite the dragged handle where they were.
def _resize_bottom_right(obj, x, y):
    obj.w = x - obj.x
    obj.h = y - obj.y


def _resize_bottom_left(obj, x, y):
    right = obj.x + obj.w
    obj.x = x
    obj.w = right - x
    obj.h = y - obj.y


def _resize_top_right(obj, x, y):
    bottom = obj.y + obj.h
    obj.y = y
    obj.h = bottom - y
    obj.w = x - obj.x


def _resize_top_left(obj, x, y):
    right = obj.x + obj.w
    bottom = obj.y + obj.h
    obj.x = x
    obj.y = y
    obj.w = right - x
    obj.h = bottom - y


def _resize_top_center(obj, x, y):
    bottom = obj.y + obj.h
    obj.y = y
    obj.h = bottom - y


RESIZERS = {
    Handle.BOTTOM_RIGHT: _resize_bottom_right,
    Handle.BOTTOM_LEFT: _resize_bottom_left,
    Handle.TOP_RIGHT: _resize_top_right,
    Handle.TOP_LEFT: _resize_top_left,
    Handle.TOP_CENTER: _resize_top_center,
}


class InteractionStateMachine(QObject):
    """Owns every piece of gesture state for one board.

    Snapshots are taken before shape creation, drag, resize and delete.
    Label typing is persisted but not snapshotted, so it is undone only
    together with the gesture that preceded it.
    """

    render_requested = Signal()
    handle_hovered = Signal(object)
    placement_requested = Signal(object, float, float)
    state_changed = Signal(object)

    def __init__(
        self,
        document: SceneDocument,
        history: HistoryManager | None = None,
        drawing_context: DrawingContext | None = None,
    ):
        super().__init__()
        self.document = document
        self.scene = document.scene
        self.history = history if history is not None else HistoryManager()
        self.drawing_context = drawing_context if drawing_context is not None else DrawingContext()
        self.tools = create_tools()
        self.text_entry_active = False

        self._state = InteractionState.IDLE
        self._start = (0.0, 0.0)
        self._drawing_object: SceneObject | None = None
        self._drag_offsets: list[tuple[SceneObject, float, float]] = []
        self._active_handle: Handle | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> InteractionState:
        return self._state

    def _set_state(self, state: InteractionState) -> None:
        if state is self._state:
            return
        logger.debug("%s -> %s", self._state.name, state.name)
        self._state = state
        self.state_changed.emit(state)

    @property
    def current_tool(self):
        return self.tools[self.drawing_context.tool]

    def set_tool(self, name: str) -> None:
        if name not in self.tools:
            raise KeyError(f"Unknown tool: {name}")
        self.drawing_context.set_tool(name)

    @property
    def active_handle(self) -> Handle | None:
        return self._active_handle

    def _commit(self) -> None:
        """Persist the scene and ask for a repaint."""
        self.document.save()
        self.render_requested.emit()

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def pointer_down(self, x: float, y: float, additive: bool = False) -> None:
        scene = self.scene
        selection = scene.selection

        if len(selection) == 1:
            handle = handle_at(selection[0], x, y)
            if handle is not None:
                self.history.snapshot(scene)
                self._active_handle = handle
                self._set_state(InteractionState.RESIZING)
                return

        tool = self.current_tool
        hit = scene.hit_test(x, y) if tool.drags_existing else None
        if hit is not None:
            scene.select_objects([hit], additive=additive)
            self.history.snapshot(scene)
            self._drag_offsets = [
                (obj, x - obj.x, y - obj.y) for obj in scene.selection
            ]
            self._set_state(InteractionState.DRAGGING)
            self.render_requested.emit()
            return

        if not tool.creates_on_press:
            scene.clear_selection()
            self.placement_requested.emit(tool.kind, x, y)
            self.render_requested.emit()
            return

        self.history.snapshot(scene)
        scene.clear_selection()
        obj = tool.begin(x, y, self.drawing_context)
        scene.add_object(obj)
        scene.select_objects([obj])
        self._start = (x, y)
        self._drawing_object = obj
        self._set_state(InteractionState.DRAWING)
        self.render_requested.emit()

    def pointer_move(self, x: float, y: float) -> None:
        state = self._state
        if state is InteractionState.DRAGGING:
            for obj, dx, dy in self._drag_offsets:
                if not self.scene.is_selected(obj):
                    continue
                obj.x = x - dx
                obj.y = y - dy
        elif state is InteractionState.DRAWING:
            obj = self._drawing_object
            if obj is not None and self.scene.is_selected(obj):
                self.current_tool.extend(obj, self._start, x, y)
        elif state is InteractionState.RESIZING:
            selection = self.scene.selection
            if len(selection) == 1 and self._active_handle is not None:
                RESIZERS[self._active_handle](selection[0], x, y)
        else:
            if len(self.scene.selection) == 1:
                self.handle_hovered.emit(handle_at(self.scene.selection[0], x, y))
            return
        self.render_requested.emit()

    def pointer_up(self, x: float | None = None, y: float | None = None) -> None:
        self._set_state(InteractionState.IDLE)
        self._active_handle = None
        self._drawing_object = None
        self._drag_offsets = []
        self._commit()

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------
    def key_press(self, key: str, ctrl: bool = False) -> bool:
        """Handle *key* and return True when it was consumed.

        *key* is ``"Delete"``, ``"Backspace"`` or a single character.
        """

        if self.text_entry_active:
            return False

        if ctrl:
            if key.lower() == "z":
                self.undo()
                return True
            return False

        selection = self.scene.selection
        if key == KEY_DELETE or (
            key == KEY_BACKSPACE
            and len(selection) == 1
            and not getattr(selection[0], "label", "")
        ):
            self.delete_selection()
            return True

        if len(selection) != 1 or selection[0].kind not in LABELLED_KINDS:
            return False

        obj = selection[0]
        if len(key) == 1 and key.isprintable():
            obj.label += key
        elif key == KEY_BACKSPACE and obj.label:
            obj.label = obj.label[:-1]
        else:
            return False
        self._commit()
        return True

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def undo(self) -> bool:
        if not self.history.undo(self.scene):
            return False
        self._commit()
        return True

    def delete_selection(self) -> bool:
        scene = self.scene
        if not scene.selection:
            return False
        self.history.snapshot(scene)
        removed = scene.remove_objects(scene.is_selected)
        scene.clear_selection()
        logger.debug("Deleted %d object(s)", len(removed))
        self._commit()
        return True

    def update_property(self, key: str, value) -> None:
        """Apply a property panel edit to the current selection."""
        self.scene.update_property(self.scene.selection, key, value)
        self._commit()

    def select_layer(self, position: int) -> SceneObject | None:
        obj = self.scene.select_layer(position)
        if obj is not None:
            self._commit()
        return obj

    def place_text(self, x: float, y: float, text: str) -> TextObject | None:
        if not text:
            return None
        self.history.snapshot(self.scene)
        obj = self.tools["Text"].create(x, y, text, self.drawing_context)
        self.scene.add_object(obj)
        self.scene.select_objects([obj])
        self._commit()
        return obj

    def insert_image(self, source_data: str, rect=DEFAULT_IMAGE_RECT) -> ImageObject:
        self.history.snapshot(self.scene)
        obj = self.tools["Image"].create(source_data, rect)
        self.scene.add_object(obj)
        self._commit()
        return obj
