# -*- coding: utf-8 -*-
"""
The GUI Package for SnapText, built on PyQt6.

Contains the main window, the screen-snip overlay and the image sources
that hand pictures to the pipeline.
"""

from .capture_overlay import CaptureOverlay
from .image_sources import CameraImageSource, FileImageSource, ScreenImageSource
from .main_window import MainWindow

__all__ = [
    "CameraImageSource",
    "CaptureOverlay",
    "FileImageSource",
    "MainWindow",
    "ScreenImageSource",
]
