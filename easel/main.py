import logging
import sys

from PySide6.QtWidgets import QApplication

from easel.core.app import App
from easel.ui.ui import MainWindow


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    q_app = QApplication(sys.argv)
    app = App()
    window = MainWindow(app)
    app.main_window = window
    app.load()
    window.show()
    return q_app.exec()


if __name__ == "__main__":
    sys.exit(main())
