"""Hit testing and box math for scene objects.

Everything here is a pure function of an object's stored ``x, y, w, h``.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import NamedTuple

from easel.core.scene_object import ObjectKind, SceneObject, check_exhaustive


HANDLE_RADIUS = 8


class Box(NamedTuple):
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


class Handle(Enum):
    TOP_LEFT = "tl"
    TOP_RIGHT = "tr"
    BOTTOM_LEFT = "bl"
    BOTTOM_RIGHT = "br"
    TOP_CENTER = "tc"


def normalize(obj: SceneObject) -> Box:
    """Return the canonical box of *obj*; width and height are never negative."""

    left = obj.x + obj.w if obj.w < 0 else obj.x
    top = obj.y + obj.h if obj.h < 0 else obj.y
    return Box(left, top, abs(obj.w), abs(obj.h))


def _box_contains(obj: SceneObject, x: float, y: float) -> bool:
    box = normalize(obj)
    return box.left <= x <= box.right and box.top <= y <= box.bottom


def _ellipse_contains(obj: SceneObject, x: float, y: float) -> bool:
    rx = abs(obj.w) / 2
    ry = abs(obj.h) / 2
    if rx == 0 or ry == 0:
        return False
    dx = x - (obj.x + obj.w / 2)
    dy = y - (obj.y + obj.h / 2)
    return (dx * dx) / (rx * rx) + (dy * dy) / (ry * ry) <= 1


def _never_contains(obj: SceneObject, x: float, y: float) -> bool:
    return False


# Triangles are hit-tested against their bounding box.
_CONTAINS = check_exhaustive(
    {
        ObjectKind.RECTANGLE: _box_contains,
        ObjectKind.ELLIPSE: _ellipse_contains,
        ObjectKind.TRIANGLE: _box_contains,
        ObjectKind.TEXT: _box_contains,
        ObjectKind.IMAGE: _box_contains,
        ObjectKind.SKETCH: _never_contains,
    },
    "Hit test table",
)


def contains(obj: SceneObject, x: float, y: float) -> bool:
    return _CONTAINS[obj.kind](obj, x, y)


# ----------------------------------------------------------------------
# Resize handles
# ----------------------------------------------------------------------
def _corner_handles(obj: SceneObject) -> list[tuple[Handle, float, float]]:
    left, top = obj.x, obj.y
    right, bottom = obj.x + obj.w, obj.y + obj.h
    return [
        (Handle.TOP_LEFT, left, top),
        (Handle.TOP_RIGHT, right, top),
        (Handle.BOTTOM_LEFT, left, bottom),
        (Handle.BOTTOM_RIGHT, right, bottom),
    ]


def _triangle_handles(obj: SceneObject) -> list[tuple[Handle, float, float]]:
    bottom = obj.y + obj.h
    return [
        (Handle.TOP_CENTER, obj.x + obj.w / 2, obj.y),
        (Handle.BOTTOM_LEFT, obj.x, bottom),
        (Handle.BOTTOM_RIGHT, obj.x + obj.w, bottom),
    ]


def _no_handles(obj: SceneObject) -> list[tuple[Handle, float, float]]:
    return []


_HANDLES = check_exhaustive(
    {
        ObjectKind.RECTANGLE: _corner_handles,
        ObjectKind.ELLIPSE: _corner_handles,
        ObjectKind.TRIANGLE: _triangle_handles,
        ObjectKind.TEXT: _no_handles,
        ObjectKind.IMAGE: _corner_handles,
        ObjectKind.SKETCH: _no_handles,
    },
    "Handle table",
)


def handle_positions(obj: SceneObject) -> list[tuple[Handle, float, float]]:
    """Return ``(handle, x, y)`` anchors in hit-test priority order."""
    return _HANDLES[obj.kind](obj)


def handle_at(obj: SceneObject, x: float, y: float) -> Handle | None:
    for handle, hx, hy in handle_positions(obj):
        if math.hypot(x - hx, y - hy) < HANDLE_RADIUS:
            return handle
    return None
