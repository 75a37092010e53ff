import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
# Run Qt headless when no display server is available.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication
import threading

threading.stack_size(134217728)


@pytest.fixture
def qapp():
    """
    Creates a QApplication for the test function, reusing one if it exists.
    """
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    app.quit()


@pytest.fixture
def storage(tmp_path, qapp):
    """An empty QSettings store backed by a file in the test directory."""
    return QSettings(str(tmp_path / "scene.ini"), QSettings.IniFormat)


@pytest.fixture
def settings_controller(tmp_path, qapp):
    from easel.core.settings_controller import SettingsController

    return SettingsController(str(tmp_path / "settings.ini"))
