from easel.core.scene_object import ObjectKind
from easel.tools.basetool import ShapeTool


class RectangleTool(ShapeTool):
    name = "Rectangle"
    kind = ObjectKind.RECTANGLE
