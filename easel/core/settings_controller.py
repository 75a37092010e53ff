from __future__ import annotations

import configparser
import logging

from PySide6.QtCore import QObject
from PySide6.QtGui import QColor

from easel.core.scene_object import FontStyle, MAX_FONT_SIZE, MIN_FONT_SIZE


logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.ini"


class SettingsController(QObject):
    """Manages application settings persistence."""

    DEFAULT_CANVAS_SETTINGS = {
        "width": 1200,
        "height": 800,
        "background": "#1e1e1e",
    }

    DEFAULT_DRAWING_SETTINGS = {
        "stroke_color": "#ffffff",
        "font_family": "Arial",
        "font_size": 18,
        "font_style": FontStyle.NORMAL,
    }

    DEFAULT_STORAGE_SETTINGS = {
        "scene_file": "scene.ini",
    }

    def __init__(self, path: str = SETTINGS_FILE):
        super().__init__()
        self.path = path
        self.config = configparser.ConfigParser()
        self.config.read(self.path)
        for section in ("Canvas", "Drawing", "Storage"):
            if not self.config.has_section(section):
                self.config.add_section(section)

        self.canvas_width = self._get_int(
            "Canvas", "width", self.DEFAULT_CANVAS_SETTINGS["width"]
        )
        self.canvas_height = self._get_int(
            "Canvas", "height", self.DEFAULT_CANVAS_SETTINGS["height"]
        )
        self.canvas_background = self._get_color(
            "Canvas", "background", self.DEFAULT_CANVAS_SETTINGS["background"]
        )

        self.stroke_color = self._get_color(
            "Drawing", "stroke_color", self.DEFAULT_DRAWING_SETTINGS["stroke_color"]
        )
        self.font_family = self.config.get(
            "Drawing", "font_family", fallback=self.DEFAULT_DRAWING_SETTINGS["font_family"]
        ).strip() or self.DEFAULT_DRAWING_SETTINGS["font_family"]
        font_size = self._get_int(
            "Drawing", "font_size", self.DEFAULT_DRAWING_SETTINGS["font_size"]
        )
        if not MIN_FONT_SIZE <= font_size <= MAX_FONT_SIZE:
            font_size = self.DEFAULT_DRAWING_SETTINGS["font_size"]
        self.font_size = font_size
        raw_style = self.config.get(
            "Drawing",
            "font_style",
            fallback=self.DEFAULT_DRAWING_SETTINGS["font_style"].value,
        )
        try:
            self.font_style = FontStyle(raw_style)
        except ValueError:
            self.font_style = self.DEFAULT_DRAWING_SETTINGS["font_style"]

        self.scene_file = self.config.get(
            "Storage", "scene_file", fallback=self.DEFAULT_STORAGE_SETTINGS["scene_file"]
        )
        self._sync_to_config()

    def save_settings(self) -> bool:
        """Persist settings to disk."""
        self._sync_to_config()
        try:
            with open(self.path, "w") as configfile:
                self.config.write(configfile)
        except OSError:
            logger.exception("Could not write %s", self.path)
            return False
        return True

    def update_drawing_settings(
        self,
        *,
        stroke_color=None,
        font_family=None,
        font_size=None,
        font_style=None,
    ):
        if stroke_color is not None:
            color = QColor(stroke_color)
            if color.isValid():
                self.stroke_color = color.name()
        if font_family:
            self.font_family = str(font_family)
        if font_size is not None:
            try:
                size = int(font_size)
            except (TypeError, ValueError):
                size = self.font_size
            if MIN_FONT_SIZE <= size <= MAX_FONT_SIZE:
                self.font_size = size
        if font_style is not None:
            try:
                self.font_style = FontStyle(font_style)
            except ValueError:
                logger.warning("Ignoring unknown font style %r", font_style)
        self._sync_to_config()

    def _get_int(self, section, option, fallback):
        try:
            return max(1, self.config.getint(section, option))
        except (configparser.NoOptionError, ValueError):
            return fallback

    def _get_color(self, section, option, fallback):
        raw_value = self.config.get(section, option, fallback=fallback)
        color = QColor(raw_value)
        if not color.isValid():
            color = QColor(fallback)
        return color.name()

    def _sync_to_config(self):
        self.config.set("Canvas", "width", str(int(self.canvas_width)))
        self.config.set("Canvas", "height", str(int(self.canvas_height)))
        self.config.set("Canvas", "background", self.canvas_background)
        self.config.set("Drawing", "stroke_color", self.stroke_color)
        self.config.set("Drawing", "font_family", self.font_family)
        self.config.set("Drawing", "font_size", str(int(self.font_size)))
        self.config.set("Drawing", "font_style", self.font_style.value)
        self.config.set("Storage", "scene_file", self.scene_file)
