import sys

from PyQt6.QtWidgets import QApplication

from .app import SnapTextApp, configure_logging
from .config import Config


def main():
    """
    The main entry point for the SnapText application.

    Loads the configuration, sets up logging, creates the QApplication and
    the SnapTextApp controller, and runs the Qt event loop.
    """
    config = Config()
    configure_logging(config.log_level)

    app = QApplication(sys.argv)
    snap_text_app = SnapTextApp(app, config=config)
    snap_text_app.show()

    # The return value of exec() is the process exit code.
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
