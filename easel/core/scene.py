from __future__ import annotations

import logging
import weakref
from collections.abc import Callable, Iterable

from PySide6.QtCore import QObject, Signal

from easel.core.geometry import contains
from easel.core.scene_object import (
    FontStyle,
    ImageObject,
    SceneObject,
    ShapeObject,
    TextObject,
    to_record,
    validate_font_size,
)


logger = logging.getLogger(__name__)


Snapshot = tuple[SceneObject, ...]


PROPERTY_COERCERS: dict[str, Callable[[object], object]] = {
    "w": float,
    "h": float,
    "fill_color": str,
    "stroke_color": str,
    "label_color": str,
    "font_family": str,
    "font_size": validate_font_size,
    "font_style": FontStyle,
}


class Scene(QObject):
    """
    Ordered collection of scene objects plus the current selection.

    List order is z-order: the last object is drawn on top.
    """

    changed = Signal()
    selection_changed = Signal()
    image_decoded = Signal()

    def __init__(self, objects: Iterable[SceneObject] = ()):
        super().__init__()
        self.objects: list[SceneObject] = []
        self.selection: list[SceneObject] = []
        self._watched_images = weakref.WeakSet()
        self.replace_objects(objects)

    def __len__(self) -> int:
        return len(self.objects)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------
    def add_object(self, obj: SceneObject) -> SceneObject:
        """Append *obj* on top of the stack."""
        self.objects.append(obj)
        self._watch_image(obj)
        self.changed.emit()
        return obj

    def remove_objects(self, predicate: Callable[[SceneObject], bool]) -> list[SceneObject]:
        """Remove every object matching *predicate* and drop it from the selection."""

        removed = [obj for obj in self.objects if predicate(obj)]
        if not removed:
            return []
        removed_ids = {id(obj) for obj in removed}
        self.objects = [obj for obj in self.objects if id(obj) not in removed_ids]
        kept_selection = [obj for obj in self.selection if id(obj) not in removed_ids]
        if len(kept_selection) != len(self.selection):
            self.selection = kept_selection
            self.selection_changed.emit()
        self.changed.emit()
        return removed

    def replace_objects(self, objects: Iterable[SceneObject]) -> None:
        self.objects = list(objects)
        self.selection = []
        for obj in self.objects:
            self._watch_image(obj)
        self.changed.emit()
        self.selection_changed.emit()

    def _watch_image(self, obj: SceneObject) -> None:
        # Clones share their handle, so restores must not connect it again.
        if not isinstance(obj, ImageObject) or obj.image in self._watched_images:
            return
        self._watched_images.add(obj.image)
        obj.image.when_ready(self.image_decoded.emit)
        obj.image.request()

    def update_property(self, targets: Iterable[SceneObject], key: str, value) -> None:
        """Set *key* to *value* on every target that has that field.

        Changing ``stroke_color`` also sets ``label_color`` on shapes that
        never had one, after which the label keeps its own color.
        """

        try:
            coerce = PROPERTY_COERCERS[key]
        except KeyError:
            raise KeyError(f"Unknown property: {key}") from None
        value = coerce(value)

        for obj in targets:
            if not hasattr(obj, key):
                logger.debug("%s has no %s; skipped", obj.kind.value, key)
                continue
            setattr(obj, key, value)
            if key == "stroke_color" and isinstance(obj, ShapeObject) and obj.label_color is None:
                obj.label_color = value
            elif key == "font_size" and isinstance(obj, TextObject):
                obj.fit_box()
        self.changed.emit()

    def hit_test(self, x: float, y: float) -> SceneObject | None:
        """Return the top-most object under ``(x, y)``."""
        for obj in reversed(self.objects):
            if contains(obj, x, y):
                return obj
        return None

    def index_of(self, obj: SceneObject) -> int:
        for index, candidate in enumerate(self.objects):
            if candidate is obj:
                return index
        raise ValueError("Object is not part of the scene.")

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def is_selected(self, obj: SceneObject) -> bool:
        return any(selected is obj for selected in self.selection)

    def select_objects(self, refs: Iterable[SceneObject], additive: bool = False) -> None:
        members = {id(obj) for obj in self.objects}
        selection = list(self.selection) if additive else []
        for obj in refs:
            if id(obj) not in members:
                continue
            if any(selected is obj for selected in selection):
                continue
            selection.append(obj)
        self.selection = selection
        self.selection_changed.emit()

    def clear_selection(self) -> None:
        if not self.selection:
            return
        self.selection = []
        self.selection_changed.emit()

    # ------------------------------------------------------------------
    # Layers (position 0 is the top-most object)
    # ------------------------------------------------------------------
    def layer_position(self, obj: SceneObject) -> int:
        return len(self.objects) - 1 - self.index_of(obj)

    def object_at_layer(self, position: int) -> SceneObject | None:
        index = len(self.objects) - 1 - position
        if 0 <= index < len(self.objects):
            return self.objects[index]
        return None

    def select_layer(self, position: int) -> SceneObject | None:
        obj = self.object_at_layer(position)
        if obj is not None:
            self.select_objects([obj])
        return obj

    # ------------------------------------------------------------------
    # Snapshots and records
    # ------------------------------------------------------------------
    def snapshot(self) -> Snapshot:
        return tuple(obj.clone() for obj in self.objects)

    def restore(self, snapshot: Snapshot) -> None:
        """Replace every object with copies of *snapshot* and clear the selection."""
        self.replace_objects(obj.clone() for obj in snapshot)

    def to_records(self) -> list[dict]:
        return [to_record(obj) for obj in self.objects]
