from easel.core.scene_object import TRANSPARENT, ObjectKind, SketchObject
from easel.tools.basetool import BaseTool


class SketchTool(BaseTool):
    """Freehand strokes. Always starts a new stroke, even over other objects."""

    name = "Sketch"
    kind = ObjectKind.SKETCH
    drags_existing = False

    def begin(self, x, y, drawing_context):
        return SketchObject(
            kind=self.kind,
            x=x,
            y=y,
            w=1,
            h=1,
            stroke_color=drawing_context.stroke_color,
            fill_color=TRANSPARENT,
            points=[(x, y)],
        )

    def extend(self, obj, start, x, y):
        obj.points.append((x, y))
