from __future__ import annotations

import os

from PySide6.QtCore import QObject, QSettings, Signal

from easel.core import exporter
from easel.core.document import SceneDocument
from easel.core.drawing_context import DrawingContext
from easel.core.history import HistoryManager
from easel.core.image_handle import data_uri_from_file
from easel.core.interaction import InteractionStateMachine
from easel.core.renderer import SceneRenderer, compose_font
from easel.core.settings_controller import SettingsController
from easel.tools.imagetool import DEFAULT_IMAGE_RECT


class App(QObject):
    """Application orchestrator wiring the board's collaborators together."""

    document_loaded = Signal()

    def __init__(self, settings_controller=None, storage: QSettings | None = None):
        super().__init__()
        self._main_window = None

        self.settings_controller = (
            settings_controller if settings_controller is not None else SettingsController()
        )
        settings = self.settings_controller
        if storage is None:
            storage = QSettings(settings.scene_file, QSettings.IniFormat)

        self.drawing_context = DrawingContext(settings)
        self.document = SceneDocument(storage)
        self.history = HistoryManager()
        self.machine = InteractionStateMachine(
            self.document, self.history, self.drawing_context
        )
        self.renderer = SceneRenderer(
            compose_font(settings.font_family, settings.font_size, settings.font_style)
        )
        self.drawing_context.stroke_color_changed.connect(self._remember_stroke_color)

    @property
    def scene(self):
        return self.document.scene

    @property
    def main_window(self):
        return self._main_window

    @main_window.setter
    def main_window(self, window):
        self._main_window = window

    @property
    def canvas_size(self) -> tuple[int, int]:
        settings = self.settings_controller
        return settings.canvas_width, settings.canvas_height

    def load(self):
        self.document.load()
        self.history.clear()
        self.document_loaded.emit()

    def set_tool(self, name: str):
        self.machine.set_tool(name)

    def insert_image_file(self, path: str, position: tuple[float, float] | None = None):
        """Embed the image at *path* as a data URI and add it to the board.

        Without a *position* the image lands in the default slot.
        """
        source_data = data_uri_from_file(path)
        if position is None:
            return self.machine.insert_image(source_data)
        x, y = position
        _, _, width, height = DEFAULT_IMAGE_RECT
        return self.machine.insert_image(source_data, (x, y, width, height))

    def _remember_stroke_color(self, color: str):
        self.settings_controller.update_drawing_settings(stroke_color=color)

    def save_settings(self) -> bool:
        context = self.drawing_context
        self.settings_controller.update_drawing_settings(
            stroke_color=context.stroke_color,
            font_family=context.font_family,
            font_size=context.font_size,
            font_style=context.font_style,
        )
        return self.settings_controller.save_settings()

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def _render_for_export(self, width=None, height=None):
        default_width, default_height = self.canvas_size
        return exporter.render_for_export(
            self.scene.objects,
            width or default_width,
            height or default_height,
            self.settings_controller.canvas_background,
            self.renderer,
        )

    def export(self, path: str, width: int | None = None, height: int | None = None) -> bool:
        """Export the board to *path*, picking the format from its extension."""

        extension = os.path.splitext(path)[1].lower()
        default_width, default_height = self.canvas_size
        width = width or default_width
        height = height or default_height
        if extension == ".json":
            exporter.export_json(self.scene.objects, path)
        elif extension in (".html", ".htm"):
            exporter.export_html(self.scene.objects, path, width, height)
        elif extension == ".png":
            return exporter.export_png(self._render_for_export(width, height), path)
        elif extension == ".pdf":
            exporter.export_pdf(self._render_for_export(width, height), path)
        else:
            raise ValueError(f"Unsupported export format: {extension or path}")
        return True
