# -*- coding: utf-8 -*-
"""
src/snaptext/gui/capture_overlay.py

Defines the CaptureOverlay widget used to snip a region of the screen.

A borderless, full-screen, semi-transparent window. The user drags a
rectangle; on release the area is grabbed with 'mss' and emitted as a
NumPy array. Every overlay emits exactly one of `image_captured` or
`capture_cancelled` before it goes away.
"""

import logging

import mss
import mss.exception
import numpy as np
from PyQt6.QtWidgets import QWidget, QApplication
from PyQt6.QtCore import Qt, QPoint, QRect, pyqtSignal
from PyQt6.QtGui import QPainter, QPen, QBrush, QColor, QCursor

logger = logging.getLogger(__name__)

OVERLAY_COLOR = QColor(0, 0, 0, 120)
SELECTION_BORDER_COLOR = QColor(50, 150, 255, 220)


class CaptureOverlay(QWidget):
    """
    A full-screen overlay for selecting and grabbing a screen region.
    """
    # Payload is the grabbed region in BGRA order, as mss returns it.
    image_captured = pyqtSignal(np.ndarray)
    capture_cancelled = pyqtSignal()

    def __init__(self):
        super().__init__()
        logger.info("Initializing CaptureOverlay.")

        screen = QApplication.primaryScreen()
        if not screen:
            logger.error("No primary screen found. Falling back to 800x600 overlay.")
            self.setGeometry(0, 0, 800, 600)
        else:
            self.setGeometry(screen.geometry())

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool  # Prevents it from appearing in the taskbar
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))

        self.begin = QPoint()
        self.end = QPoint()
        self.is_selecting = False
        self._finished = False

    def showEvent(self, event):
        super().showEvent(event)
        self.activateWindow()
        self.raise_()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QBrush(OVERLAY_COLOR))

        if self.is_selecting:
            selection_rect = QRect(self.begin, self.end).normalized()

            # Punch the selection out of the dimmed overlay.
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
            painter.fillRect(selection_rect, Qt.BrushStyle.SolidPattern)
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)

            painter.setPen(QPen(SELECTION_BORDER_COLOR, 1, Qt.PenStyle.SolidLine))
            painter.drawRect(selection_rect)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self.begin = event.position().toPoint()
            self.end = self.begin
            self.is_selecting = True
            self.update()

    def mouseMoveEvent(self, event):
        if self.is_selecting:
            self.end = event.position().toPoint()
            self.update()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self.is_selecting:
            self.is_selecting = False
            self.hide()

            selection_rect = QRect(self.begin, self.end).normalized()
            if selection_rect.width() > 1 and selection_rect.height() > 1:
                self.capture_screen(selection_rect)
            else:
                logger.warning("Selection was too small, capture aborted.")
                self._cancel()
            self.close()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape:
            logger.info("Capture cancelled by user (Escape key).")
            self.is_selecting = False
            self._cancel()
            self.close()

    def closeEvent(self, event):
        # Closed by the window manager before a selection was made.
        self._cancel()
        super().closeEvent(event)

    def capture_screen(self, rect: QRect):
        """Grabs `rect` (global logical coordinates) with mss and emits it."""
        top_left = self.mapToGlobal(rect.topLeft())
        monitor = {
            "top": top_left.y(),
            "left": top_left.x(),
            "width": rect.width(),
            "height": rect.height(),
        }
        logger.info(f"Capturing screen area: {monitor}")
        try:
            with mss.mss() as sct:
                img_array = np.array(sct.grab(monitor))
        except mss.exception.ScreenShotError as e:
            logger.error(f"Failed to capture screen: {e}")
            self._cancel()
            return

        logger.info(f"Image captured with shape: {img_array.shape}")
        self._finished = True
        self.image_captured.emit(img_array)

    def _cancel(self):
        if not self._finished:
            self._finished = True
            self.capture_cancelled.emit()
