from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field
from enum import Enum

from easel.core.image_handle import ImageHandle


TRANSPARENT = "transparent"
DEFAULT_STROKE = "#ffffff"
MIN_FONT_SIZE = 1
MAX_FONT_SIZE = 120
# Rough advance of one character relative to the font size.
CHAR_WIDTH_FACTOR = 0.6


class ObjectKind(Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    TRIANGLE = "triangle"
    TEXT = "text"
    IMAGE = "image"
    SKETCH = "sketch"


class FontStyle(Enum):
    NORMAL = "normal"
    ITALIC = "italic"
    BOLD = "bold"


LABELLED_KINDS = frozenset(
    {ObjectKind.RECTANGLE, ObjectKind.ELLIPSE, ObjectKind.TRIANGLE}
)


def check_exhaustive(table: dict, purpose: str) -> dict:
    """Raise unless *table* has an entry for every :class:`ObjectKind`."""

    missing = [kind.value for kind in ObjectKind if kind not in table]
    if missing:
        raise TypeError(f"{purpose} has no entry for: {', '.join(missing)}")
    return table


def validate_font_size(value: object) -> int:
    size = int(value)
    if not MIN_FONT_SIZE <= size <= MAX_FONT_SIZE:
        raise ValueError(
            f"Font size must be between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}, got {size}."
        )
    return size


@dataclass(eq=False)
class SceneObject:
    """Fields shared by every drawable object on the board.

    ``w`` and ``h`` are signed: a negative extent means the box grows
    left/up from ``(x, y)``. Use :func:`easel.core.geometry.normalize` to
    get a canonical box.
    """

    kind: ObjectKind
    x: float
    y: float
    w: float = 1
    h: float = 1
    stroke_color: str = DEFAULT_STROKE
    fill_color: str = TRANSPARENT
    id: int = field(default=0)

    _last_id = 0

    def __post_init__(self):
        if not self.id:
            self.id = SceneObject.next_id()
        else:
            SceneObject.reserve_id(self.id)

    @classmethod
    def next_id(cls) -> int:
        candidate = int(time.time() * 1000)
        cls._last_id = max(candidate, cls._last_id + 1)
        return cls._last_id

    @classmethod
    def reserve_id(cls, object_id: int) -> None:
        """Make sure freshly allocated ids never collide with *object_id*."""
        cls._last_id = max(cls._last_id, int(object_id))

    @property
    def has_fill(self) -> bool:
        return bool(self.fill_color) and self.fill_color != TRANSPARENT

    def clone(self) -> "SceneObject":
        return dataclasses.replace(self)


@dataclass(eq=False)
class ShapeObject(SceneObject):
    label: str = ""
    label_color: str | None = None

    @property
    def effective_label_color(self) -> str:
        return self.label_color or self.stroke_color or DEFAULT_STROKE


@dataclass(eq=False)
class TextObject(SceneObject):
    text: str = ""
    font_family: str = "Arial"
    font_size: int = 18
    font_style: FontStyle = FontStyle.NORMAL

    def __post_init__(self):
        super().__post_init__()
        self.font_size = validate_font_size(self.font_size)
        self.font_style = FontStyle(self.font_style)

    @property
    def text_color(self) -> str:
        return self.fill_color if self.has_fill else self.stroke_color

    def fit_box(self) -> None:
        """Size the box from the text and font size, growing up from the baseline."""
        self.w = max(1, round(len(self.text) * self.font_size * CHAR_WIDTH_FACTOR))
        self.h = -self.font_size


@dataclass(eq=False)
class ImageObject(SceneObject):
    source_data: str = ""
    image: ImageHandle | None = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        super().__post_init__()
        if self.image is None:
            self.image = ImageHandle(self.source_data)


@dataclass(eq=False)
class SketchObject(SceneObject):
    points: list[tuple[float, float]] = field(default_factory=list)

    def clone(self) -> "SketchObject":
        return dataclasses.replace(self, points=list(self.points))


OBJECT_CLASSES = check_exhaustive(
    {
        ObjectKind.RECTANGLE: ShapeObject,
        ObjectKind.ELLIPSE: ShapeObject,
        ObjectKind.TRIANGLE: ShapeObject,
        ObjectKind.TEXT: TextObject,
        ObjectKind.IMAGE: ImageObject,
        ObjectKind.SKETCH: SketchObject,
    },
    "Object class table",
)


# ----------------------------------------------------------------------
# Records
# ----------------------------------------------------------------------
_LEGACY_KINDS = {"rect": "rectangle", "circle": "ellipse"}
_LEGACY_FONT_STYLES = {"600": "bold"}


def to_record(obj: SceneObject) -> dict:
    """Return a JSON compatible dict for *obj*. Decoded bitmaps are left out."""

    record = {
        "id": obj.id,
        "kind": obj.kind.value,
        "x": obj.x,
        "y": obj.y,
        "w": obj.w,
        "h": obj.h,
        "strokeColor": obj.stroke_color,
        "fillColor": obj.fill_color,
    }
    if isinstance(obj, ShapeObject):
        record["label"] = obj.label
        if obj.label_color is not None:
            record["labelColor"] = obj.label_color
    elif isinstance(obj, TextObject):
        record["text"] = obj.text
        record["fontFamily"] = obj.font_family
        record["fontSize"] = obj.font_size
        record["fontStyle"] = obj.font_style.value
    elif isinstance(obj, ImageObject):
        record["sourceData"] = obj.source_data
    elif isinstance(obj, SketchObject):
        record["points"] = [{"x": px, "y": py} for px, py in obj.points]
    return record


def from_record(record: dict) -> SceneObject:
    """Build an object from :func:`to_record` output.

    The legacy record layout (``type``, ``stroke``, ``fill``, ``src``) is
    accepted too. Raises ``KeyError``, ``TypeError`` or ``ValueError`` for
    records that cannot be understood.
    """

    raw_kind = record.get("kind", record.get("type"))
    kind = ObjectKind(_LEGACY_KINDS.get(raw_kind, raw_kind))
    common = {
        "kind": kind,
        "x": float(record["x"]),
        "y": float(record["y"]),
        "w": float(record.get("w", 1)),
        "h": float(record.get("h", 1)),
        "stroke_color": record.get("strokeColor", record.get("stroke", DEFAULT_STROKE)),
        "fill_color": record.get("fillColor", record.get("fill", TRANSPARENT)),
        "id": int(record.get("id") or 0),
    }

    cls = OBJECT_CLASSES[kind]
    if cls is ShapeObject:
        return ShapeObject(
            **common,
            label=str(record.get("label") or ""),
            label_color=record.get("labelColor"),
        )
    if cls is TextObject:
        raw_style = str(record.get("fontStyle") or FontStyle.NORMAL.value)
        return TextObject(
            **common,
            text=str(record.get("text", "")),
            font_family=record.get("fontFamily", "Arial"),
            font_size=record.get("fontSize", 18),
            font_style=_LEGACY_FONT_STYLES.get(raw_style, raw_style),
        )
    if cls is ImageObject:
        return ImageObject(
            **common, source_data=record.get("sourceData", record.get("src", ""))
        )
    points = [(float(p["x"]), float(p["y"])) for p in record.get("points", [])]
    return SketchObject(**common, points=points)
