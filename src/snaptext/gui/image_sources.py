# -*- coding: utf-8 -*-
"""
src/snaptext/gui/image_sources.py

Image sources for the pipeline.

Every source implements `request_image(callback)` and calls `callback`
exactly once, with a CapturedImage or with None if the user cancelled.
"""

import logging
import threading
from typing import Callable, Optional

import cv2
import numpy as np
from PyQt6.QtWidgets import QFileDialog, QWidget

from ..core.image_processor import IMAGE_FILE_PATTERNS, decode_image_file
from ..core.session import CapturedImage
from .capture_overlay import CaptureOverlay

logger = logging.getLogger(__name__)

ImageCallback = Callable[[Optional[CapturedImage]], None]

SOURCE_FILE = "file"
SOURCE_CAMERA = "camera"
SOURCE_SCREEN = "screen"


class FileImageSource:
    """Lets the user choose an existing photo with a file dialog."""

    def __init__(self, parent: QWidget = None, start_dir: str = ""):
        self.parent = parent
        self.start_dir = start_dir

    def request_image(self, callback: ImageCallback):
        file_filter = f"Images ({' '.join(IMAGE_FILE_PATTERNS)});;All files (*)"
        path, _ = QFileDialog.getOpenFileName(
            self.parent, "Choose a photo", self.start_dir, file_filter
        )
        if not path:
            logger.info("File selection cancelled.")
            callback(None)
            return
        callback(decode_image_file(path))


class CameraImageSource:
    """Takes a single frame from a camera on a worker thread."""

    # Auto-exposure needs a few frames to settle on most webcams.
    WARMUP_FRAMES = 5

    def __init__(self, device_index: int = 0):
        self.device_index = device_index

    def request_image(self, callback: ImageCallback) -> threading.Thread:
        worker = threading.Thread(
            target=self._grab, args=(callback,), name="snaptext-camera", daemon=True
        )
        worker.start()
        return worker

    def _grab(self, callback: ImageCallback):
        frame = None
        capture = cv2.VideoCapture(self.device_index)
        try:
            if not capture.isOpened():
                logger.error(f"Camera {self.device_index} could not be opened.")
            else:
                for _ in range(self.WARMUP_FRAMES):
                    ok, candidate = capture.read()
                    if ok:
                        frame = candidate
        finally:
            capture.release()

        if frame is None:
            logger.error(f"Camera {self.device_index} returned no frame.")
            callback(None)
            return
        logger.info(f"Camera frame captured with shape: {frame.shape}")
        callback(CapturedImage(pixels=frame, origin=f"camera:{self.device_index}"))


class ScreenImageSource:
    """Lets the user snip a rectangle of the screen."""

    def __init__(self):
        self.overlay: Optional[CaptureOverlay] = None

    def request_image(self, callback: ImageCallback):
        overlay = CaptureOverlay()
        delivered = []

        def deliver(image: Optional[CapturedImage]):
            if delivered:
                return
            delivered.append(image)
            callback(image)

        def on_captured(pixels: np.ndarray):
            deliver(CapturedImage(pixels=pixels, origin="screen"))

        def on_cancelled():
            deliver(None)

        overlay.image_captured.connect(on_captured)
        overlay.capture_cancelled.connect(on_cancelled)
        # Held until the next request so the widget outlives its own event handlers.
        self.overlay = overlay
        overlay.show()


def create_image_source(kind: str, parent: QWidget = None, camera_index: int = 0):
    """Builds the source named by `kind` (file, camera or screen)."""
    if kind == SOURCE_FILE:
        return FileImageSource(parent)
    if kind == SOURCE_CAMERA:
        return CameraImageSource(camera_index)
    if kind == SOURCE_SCREEN:
        return ScreenImageSource()
    raise ValueError(f"Unknown image source '{kind}'")
