from PySide6.QtCore import Qt

from easel.core.scene_object import TRANSPARENT, ObjectKind, TextObject
from easel.tools.basetool import BaseTool


class TextTool(BaseTool):
    name = "Text"
    kind = ObjectKind.TEXT
    cursor_shape = Qt.IBeamCursor
    creates_on_press = False

    def create(self, x, y, text, drawing_context) -> TextObject:
        """Build a text object whose baseline starts at ``(x, y)``.

        The box grows upward from the baseline (negative ``h``).
        """

        obj = TextObject(
            kind=self.kind,
            x=x,
            y=y,
            stroke_color=drawing_context.stroke_color,
            fill_color=TRANSPARENT,
            text=text,
            font_family=drawing_context.font_family,
            font_size=drawing_context.font_size,
            font_style=drawing_context.font_style,
        )
        obj.fit_box()
        return obj
