# -*- coding: utf-8 -*-
"""
src/snaptext/app.py

Core application controller for SnapText.

`SnapTextApp` wires the pieces together: it reads the configuration, builds
the EasyOCR recognizer and the image sources, creates the pipeline
controller and shows the main window.
"""

import logging

from PyQt6.QtWidgets import QApplication

from .config import APP_NAME, IMAGE_SOURCES, Config
from .core.pipeline import PipelineController
from .core.recognizer import EasyOcrRecognizer
from .gui.image_sources import SOURCE_FILE, create_image_source
from .gui.main_window import MainWindow

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO"):
    """Configures the root logger for the application."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)


class SnapTextApp:
    """
    The application shell. Owns the long-lived objects for the lifetime of
    the Qt event loop.
    """

    def __init__(self, app: QApplication, config: Config = None, recognizer=None):
        self.app = app
        self.config = config or Config()
        self.app.setApplicationName(APP_NAME)

        self.recognizer = recognizer or EasyOcrRecognizer(
            languages=self.config.languages,
            gpu=self.config.gpu,
            confidence_threshold=self.config.confidence_threshold,
        )
        self.image_sources = {
            kind: create_image_source(kind, camera_index=self.config.camera_index)
            for kind in IMAGE_SOURCES
        }
        self.controller = PipelineController(
            image_source=self.image_sources[self.config.default_source],
            recognizer=self.recognizer,
        )
        self.window = MainWindow(
            self.controller,
            self.image_sources,
            preview_height=self.config.preview_height,
            copy_on_success=self.config.copy_on_success,
        )
        # The file dialog is parented to the window once it exists.
        self.image_sources[SOURCE_FILE].parent = self.window

        self.app.aboutToQuit.connect(self.quit_app)
        logger.info(f"{APP_NAME} started (config: {self.config.config_file_path}).")

    def show(self):
        self.window.show()

    def quit_app(self):
        """Releases the session before the event loop exits."""
        logger.info(f"Quitting {APP_NAME}...")
        self.controller.clear()
