from PySide6.QtCore import Qt

from easel.core.scene_object import TRANSPARENT, ObjectKind, ImageObject
from easel.tools.basetool import BaseTool

DEFAULT_IMAGE_RECT = (100, 100, 300, 300)


class ImageTool(BaseTool):
    name = "Image"
    kind = ObjectKind.IMAGE
    cursor_shape = Qt.ArrowCursor
    creates_on_press = False

    def create(self, source_data, rect=DEFAULT_IMAGE_RECT) -> ImageObject:
        x, y, w, h = rect
        return ImageObject(
            kind=self.kind,
            x=x,
            y=y,
            w=w,
            h=h,
            stroke_color=TRANSPARENT,
            fill_color=TRANSPARENT,
            source_data=source_data,
        )
