from __future__ import annotations

import base64
import binascii
import io
import logging
import mimetypes
from collections.abc import Callable
from pathlib import Path

from PIL import Image, ImageQt
from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtGui import QImage


logger = logging.getLogger(__name__)


def encode_data_uri(data: bytes, mime_type: str = "image/png") -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def data_uri_from_file(path: str | Path) -> str:
    """Read an image file into a self-contained ``data:`` URI."""

    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    return encode_data_uri(path.read_bytes(), mime_type or "application/octet-stream")


def decode_data_uri(uri: str) -> bytes:
    """Return the payload of a base64 ``data:`` URI.

    Raises ``ValueError`` when *uri* is not a base64 data URI.
    """

    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI.")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Corrupt base64 payload: {exc}") from exc


class ImageHandle(QObject):
    """Lazily decoded bitmap for an image object.

    The handle moves from undecoded to ready at most once. ``ready`` is
    emitted on that transition; a failed decode leaves the handle undecoded.
    """

    ready = Signal()

    def __init__(self, source_data: str):
        super().__init__()
        self.source_data = source_data
        self._image: QImage | None = None
        self._pending = False
        self.failed = False

    @property
    def is_ready(self) -> bool:
        return self._image is not None

    @property
    def image(self) -> QImage | None:
        return self._image

    def when_ready(self, callback: Callable[[], None]) -> None:
        """Run *callback* once the bitmap is available."""

        if self.is_ready:
            callback()
        else:
            self.ready.connect(callback)

    def request(self) -> None:
        """Schedule a decode on the next turn of the event loop."""

        if self.is_ready or self._pending or self.failed:
            return
        self._pending = True
        QTimer.singleShot(0, self.decode)

    def decode(self) -> bool:
        self._pending = False
        if self.is_ready:
            return True
        if self.failed:
            return False

        try:
            payload = decode_data_uri(self.source_data)
            with Image.open(io.BytesIO(payload)) as pil_image:
                q_image = ImageQt.toqimage(pil_image.convert("RGBA")).copy()
        except (ValueError, OSError) as exc:
            self.failed = True
            logger.warning("Could not decode image data: %s", exc)
            return False

        if q_image.isNull():
            self.failed = True
            logger.warning("Decoded image is empty.")
            return False

        self._image = q_image
        self.ready.emit()
        return True
