"""Shared builders for the test modules."""

import io

from PIL import Image

from easel.core.image_handle import encode_data_uri
from easel.core.scene_object import ObjectKind, ShapeObject


def make_shape(kind=ObjectKind.RECTANGLE, x=0, y=0, w=100, h=100, **kwargs):
    return ShapeObject(kind=kind, x=x, y=y, w=w, h=h, **kwargs)


def png_data_uri(width=4, height=4, color=(255, 0, 0, 255)):
    buffer = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buffer, format="PNG")
    return encode_data_uri(buffer.getvalue(), "image/png")
