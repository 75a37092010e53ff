from easel.core.scene_object import ObjectKind
from easel.tools.basetool import ShapeTool


class EllipseTool(ShapeTool):
    name = "Ellipse"
    kind = ObjectKind.ELLIPSE
