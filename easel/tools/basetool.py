from __future__ import annotations

from PySide6.QtCore import Qt

from easel.core.scene_object import TRANSPARENT, ObjectKind, SceneObject, ShapeObject


class BaseTool:
    """Abstract base class for all board tools.

    A drawing tool creates its object on pointer-down with :meth:`begin`
    and grows it on every pointer-move with :meth:`extend`. Placement tools
    (``creates_on_press = False``) build their object from data the user
    supplies afterwards, such as typed text or a chosen image file.
    """

    name = None
    kind: ObjectKind | None = None
    cursor_shape = Qt.CrossCursor
    creates_on_press = True
    drags_existing = True

    def begin(self, x: float, y: float, drawing_context) -> SceneObject | None:
        return None

    def extend(self, obj: SceneObject, start: tuple[float, float], x: float, y: float):
        pass


class ShapeTool(BaseTool):
    """Creates a box-shaped object and sizes it from the drag start."""

    def begin(self, x, y, drawing_context):
        return ShapeObject(
            kind=self.kind,
            x=x,
            y=y,
            w=1,
            h=1,
            stroke_color=drawing_context.stroke_color,
            fill_color=TRANSPARENT,
        )

    def extend(self, obj, start, x, y):
        # Sign is kept; boxes are normalized when drawn or hit-tested.
        obj.w = x - start[0]
        obj.h = y - start[1]
