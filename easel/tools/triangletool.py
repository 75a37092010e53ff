from easel.core.scene_object import ObjectKind
from easel.tools.basetool import ShapeTool


class TriangleTool(ShapeTool):
    name = "Triangle"
    kind = ObjectKind.TRIANGLE
