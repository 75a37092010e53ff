from __future__ import annotations

import json
import logging

from PySide6.QtCore import QSettings

from easel.core.scene import Scene
from easel.core.scene_object import SceneObject, from_record


logger = logging.getLogger(__name__)

STORAGE_KEY = "scene/objects"


class SceneDocument:
    """The persisted board: a :class:`Scene` backed by a ``QSettings`` store.

    The whole scene is written as one JSON array under :data:`STORAGE_KEY`.
    """

    def __init__(self, storage: QSettings, scene: Scene | None = None) -> None:
        self.storage = storage
        self.scene = scene if scene is not None else Scene()

    @classmethod
    def from_file(cls, path: str) -> "SceneDocument":
        return cls(QSettings(path, QSettings.IniFormat))

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @staticmethod
    def parse(raw: object) -> list[SceneObject]:
        """Turn stored JSON text into objects.

        Missing or malformed data gives an empty list; individual records
        that cannot be read are skipped.
        """

        if raw is None or raw == "":
            return []
        try:
            records = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Stored scene is not valid JSON, starting empty: %s", exc)
            return []
        if not isinstance(records, list):
            logger.warning("Stored scene is not a list, starting empty.")
            return []

        objects = []
        for index, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("Skipping scene record %d: not an object", index)
                continue
            try:
                objects.append(from_record(record))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping scene record %d: %s", index, exc)
        return objects

    def load(self) -> list[SceneObject]:
        """Replace the scene with the stored objects and return them.

        Image objects get a fresh decode request; the scene emits
        ``image_decoded`` as each one finishes.
        """

        objects = self.parse(self.storage.value(STORAGE_KEY, "", type=str))
        self.scene.replace_objects(objects)
        logger.info("Loaded %d object(s)", len(objects))
        return objects

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------
    def dumps(self, indent: int | None = None) -> str:
        return json.dumps(self.scene.to_records(), indent=indent)

    def save(self) -> None:
        self.storage.setValue(STORAGE_KEY, self.dumps())
        self.storage.sync()
