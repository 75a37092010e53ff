from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtGui import QColor

from easel.core.scene_object import DEFAULT_STROKE, FontStyle, validate_font_size


class DrawingContext(QObject):
    tool_changed = Signal(str)
    stroke_color_changed = Signal(str)
    font_family_changed = Signal(str)
    font_size_changed = Signal(int)
    font_style_changed = Signal(object)

    def __init__(self, settings=None):
        super().__init__()
        self.tool = "Rectangle"
        self.stroke_color = DEFAULT_STROKE
        self.font_family = "Arial"
        self.font_size = 18
        self.font_style = FontStyle.NORMAL
        if settings is not None:
            self.stroke_color = settings.stroke_color
            self.font_family = settings.font_family
            self.font_size = settings.font_size
            self.font_style = settings.font_style

    @Slot(str)
    def set_tool(self, tool):
        if tool == self.tool:
            return
        self.tool = tool
        self.tool_changed.emit(self.tool)

    @Slot(str)
    def set_stroke_color(self, color):
        # Accepts a string or a QColor
        if isinstance(color, QColor):
            color = color.name()
        self.stroke_color = color
        self.stroke_color_changed.emit(self.stroke_color)

    @Slot(str)
    def set_font_family(self, family):
        self.font_family = family
        self.font_family_changed.emit(self.font_family)

    @Slot(int)
    def set_font_size(self, size):
        self.font_size = validate_font_size(size)
        self.font_size_changed.emit(self.font_size)

    def set_font_style(self, style):
        self.font_style = FontStyle(style)
        self.font_style_changed.emit(self.font_style)
