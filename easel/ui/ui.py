import functools
import logging

from PySide6.QtCore import QSignalBlocker, Qt, QTimer, Slot
from PySide6.QtGui import QAction, QActionGroup, QColor
from PySide6.QtWidgets import (
    QColorDialog,
    QComboBox,
    QDockWidget,
    QFileDialog,
    QFontComboBox,
    QInputDialog,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QSpinBox,
    QToolBar,
)

from easel.core.scene_object import (
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    FontStyle,
    ObjectKind,
)
from easel.tools import TOOL_CLASSES
from easel.ui.canvas import Canvas


logger = logging.getLogger(__name__)

EXPORT_FORMATS = (
    ("JSON", "JSON (*.json)", ".json"),
    ("HTML", "HTML (*.html)", ".html"),
    ("PNG", "PNG (*.png)", ".png"),
    ("PDF", "PDF (*.pdf)", ".pdf"),
)
IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp);;All Files (*)"


class MainWindow(QMainWindow):
    def __init__(self, app):
        super().__init__()
        self.app = app
        self.machine = app.machine
        self.scene = app.scene
        self.setWindowTitle("Easel")
        self.resize(1200, 800)

        self.canvas = Canvas(self.app, self)
        self.setCentralWidget(self.canvas)

        self.tool_actions = {}
        self._setup_menus()
        self._setup_tool_bar()
        self._setup_property_bar()
        self._setup_layer_dock()

        self.machine.placement_requested.connect(self.on_placement_requested)
        self.machine.render_requested.connect(self.refresh_panels)
        self.scene.selection_changed.connect(self.refresh_panels)
        self.app.document_loaded.connect(self.refresh_panels)
        self.app.drawing_context.tool_changed.connect(self.update_tool_buttons)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------
    def _setup_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        insert_action = QAction("Insert &Image...", self)
        insert_action.triggered.connect(self.insert_image)
        file_menu.addAction(insert_action)

        export_menu = file_menu.addMenu("&Export")
        for label, file_filter, extension in EXPORT_FORMATS:
            action = QAction(label, self)
            action.triggered.connect(
                functools.partial(self.export_board, file_filter, extension)
            )
            export_menu.addAction(action)

        file_menu.addSeparator()
        exit_action = QAction("E&xit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = self.menuBar().addMenu("&Edit")
        self.undo_action = QAction("&Undo", self)
        self.undo_action.triggered.connect(self.machine.undo)
        edit_menu.addAction(self.undo_action)
        delete_action = QAction("&Delete", self)
        delete_action.triggered.connect(self.machine.delete_selection)
        edit_menu.addAction(delete_action)

    def _setup_tool_bar(self):
        tool_bar = QToolBar("Tools", self)
        tool_bar.setObjectName("tools")
        self.addToolBar(Qt.LeftToolBarArea, tool_bar)
        group = QActionGroup(self)
        group.setExclusive(True)
        for tool_cls in TOOL_CLASSES:
            action = QAction(tool_cls.name, self)
            action.setCheckable(True)
            action.triggered.connect(
                lambda checked=False, name=tool_cls.name: self.app.set_tool(name)
            )
            group.addAction(action)
            tool_bar.addAction(action)
            self.tool_actions[tool_cls.name] = action
        self.update_tool_buttons(self.app.drawing_context.tool)

    def _setup_property_bar(self):
        bar = QToolBar("Properties", self)
        bar.setObjectName("properties")
        self.addToolBar(Qt.TopToolBarArea, bar)
        context = self.app.drawing_context

        stroke_action = QAction("Stroke", self)
        stroke_action.triggered.connect(self.choose_stroke_color)
        bar.addAction(stroke_action)
        fill_action = QAction("Fill", self)
        fill_action.triggered.connect(self.choose_fill_color)
        bar.addAction(fill_action)
        clear_fill_action = QAction("No Fill", self)
        clear_fill_action.triggered.connect(
            functools.partial(self.apply_property, "fill_color", "transparent")
        )
        bar.addAction(clear_fill_action)
        bar.addSeparator()

        bar.addWidget(QLabel(" W "))
        self.width_spin = QSpinBox(self)
        self.width_spin.setRange(-10000, 10000)
        self.width_spin.valueChanged.connect(functools.partial(self.apply_property, "w"))
        bar.addWidget(self.width_spin)
        bar.addWidget(QLabel(" H "))
        self.height_spin = QSpinBox(self)
        self.height_spin.setRange(-10000, 10000)
        self.height_spin.valueChanged.connect(functools.partial(self.apply_property, "h"))
        bar.addWidget(self.height_spin)
        bar.addSeparator()

        self.font_family_box = QFontComboBox(self)
        self.font_family_box.setCurrentText(context.font_family)
        self.font_family_box.currentTextChanged.connect(self.on_font_family_changed)
        bar.addWidget(self.font_family_box)

        self.font_size_spin = QSpinBox(self)
        self.font_size_spin.setRange(MIN_FONT_SIZE, MAX_FONT_SIZE)
        self.font_size_spin.setValue(context.font_size)
        self.font_size_spin.valueChanged.connect(self.on_font_size_changed)
        bar.addWidget(self.font_size_spin)

        self.font_style_box = QComboBox(self)
        for style in FontStyle:
            self.font_style_box.addItem(style.value.capitalize(), style)
        self.font_style_box.setCurrentIndex(list(FontStyle).index(context.font_style))
        self.font_style_box.currentIndexChanged.connect(self.on_font_style_changed)
        bar.addWidget(self.font_style_box)

    def _setup_layer_dock(self):
        dock = QDockWidget("Layers", self)
        dock.setObjectName("layers")
        self.layer_list = QListWidget(dock)
        self.layer_list.itemClicked.connect(self.on_layer_clicked)
        dock.setWidget(self.layer_list)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    # ------------------------------------------------------------------
    # Panels
    # ------------------------------------------------------------------
    @Slot()
    def refresh_panels(self):
        self._refresh_layer_list()
        selection = self.scene.selection
        if not selection:
            return
        # Mirror the first selected object's size without echoing edits back.
        first = selection[0]
        with QSignalBlocker(self.width_spin), QSignalBlocker(self.height_spin):
            self.width_spin.setValue(round(first.w))
            self.height_spin.setValue(round(first.h))

    def _refresh_layer_list(self):
        self.layer_list.clear()
        for position in range(len(self.scene)):
            obj = self.scene.object_at_layer(position)
            item = QListWidgetItem(f"Layer {position + 1} ({obj.kind.value.upper()})")
            item.setData(Qt.UserRole, position)
            if self.scene.is_selected(obj):
                item.setForeground(QColor("#3b82f6"))
            self.layer_list.addItem(item)

    @Slot(QListWidgetItem)
    def on_layer_clicked(self, item):
        self.machine.select_layer(item.data(Qt.UserRole))

    @Slot(str)
    def update_tool_buttons(self, tool_name):
        action = self.tool_actions.get(tool_name)
        if action is not None:
            action.setChecked(True)

    # ------------------------------------------------------------------
    # Property edits
    # ------------------------------------------------------------------
    def apply_property(self, key, value, *_):
        if not self.scene.selection:
            return
        try:
            self.machine.update_property(key, value)
        except (KeyError, ValueError) as exc:
            self.statusBar().showMessage(str(exc), 5000)

    @Slot()
    def choose_stroke_color(self):
        context = self.app.drawing_context
        color = QColorDialog.getColor(QColor(context.stroke_color), self, "Stroke Color")
        if not color.isValid():
            return
        context.set_stroke_color(color.name())
        self.apply_property("stroke_color", color.name())

    @Slot()
    def choose_fill_color(self):
        color = QColorDialog.getColor(QColor("white"), self, "Fill Color")
        if color.isValid():
            self.apply_property("fill_color", color.name())

    @Slot(str)
    def on_font_family_changed(self, family):
        self.app.drawing_context.set_font_family(family)
        self.apply_property("font_family", family)

    @Slot(int)
    def on_font_size_changed(self, size):
        self.app.drawing_context.set_font_size(size)
        self.apply_property("font_size", size)

    @Slot(int)
    def on_font_style_changed(self, index):
        style = self.font_style_box.itemData(index)
        self.app.drawing_context.set_font_style(style)
        self.apply_property("font_style", style)

    # ------------------------------------------------------------------
    # Placement, import and export
    # ------------------------------------------------------------------
    @Slot(object, float, float)
    def on_placement_requested(self, kind, x, y):
        # Modal prompts run after the pointer event has finished.
        QTimer.singleShot(0, functools.partial(self.prompt_placement, kind, x, y))

    def prompt_placement(self, kind, x, y):
        if kind is ObjectKind.TEXT:
            self.machine.text_entry_active = True
            try:
                text, accepted = QInputDialog.getText(self, "Add Text", "Text:")
            finally:
                self.machine.text_entry_active = False
            if accepted and text:
                self.machine.place_text(x, y, text)
        elif kind is ObjectKind.IMAGE:
            self.insert_image(position=(x, y))

    def insert_image(self, *_, position=None):
        file_path, _ = QFileDialog.getOpenFileName(self, "Insert Image", "", IMAGE_FILTER)
        if not file_path:
            return
        try:
            if position is None:
                self.app.insert_image_file(file_path)
            else:
                self.app.insert_image_file(file_path, position)
        except OSError as exc:
            logger.warning("Could not read %s: %s", file_path, exc)
            QMessageBox.warning(self, "Insert Image", f"Could not read the file.\n\n{exc}")

    def export_board(self, file_filter, extension, *_):
        file_path, _ = QFileDialog.getSaveFileName(self, "Export", "", file_filter)
        if not file_path:
            return
        if not file_path.lower().endswith(extension):
            file_path += extension
        try:
            exported = self.app.export(file_path)
        except OSError as exc:
            logger.warning("Export to %s failed: %s", file_path, exc)
            exported = False
        if exported:
            self.statusBar().showMessage(f"Exported {file_path}", 5000)
        else:
            QMessageBox.warning(self, "Export", f"Could not write {file_path}.")

    def closeEvent(self, event):
        self.app.save_settings()
        super().closeEvent(event)
