"""Board tools, in toolbar order."""

from .basetool import BaseTool, ShapeTool
from .rectangletool import RectangleTool
from .ellipsetool import EllipseTool
from .triangletool import TriangleTool
from .sketchtool import SketchTool
from .texttool import TextTool
from .imagetool import ImageTool

TOOL_CLASSES = (
    RectangleTool,
    EllipseTool,
    TriangleTool,
    SketchTool,
    TextTool,
    ImageTool,
)


def create_tools() -> dict[str, BaseTool]:
    return {tool_cls.name: tool_cls() for tool_cls in TOOL_CLASSES}


__all__ = [
    "BaseTool",
    "ShapeTool",
    "RectangleTool",
    "EllipseTool",
    "TriangleTool",
    "SketchTool",
    "TextTool",
    "ImageTool",
    "TOOL_CLASSES",
    "create_tools",
]
