# -*- coding: utf-8 -*-
"""
src/snaptext/gui/main_window.py

Defines the MainWindow widget: the single screen of SnapText.

The window is a pure consumer of the pipeline controller. It renders every
SessionSnapshot the controller publishes and forwards the user's actions
(choose/take/snip a photo, clear, copy) back into it.
"""

import logging
from typing import Dict, Optional

import cv2
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPlainTextEdit,
    QProgressBar,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont, QImage, QPixmap

from ..core.errors import ImageDecodeError
from ..core.image_processor import prepare_for_recognition
from ..core.pipeline import PipelineController
from ..core.session import CapturedImage, SessionSnapshot, SessionState
from ..utils.clipboard_manager import copy_to_clipboard
from .image_sources import SOURCE_CAMERA, SOURCE_FILE, SOURCE_SCREEN

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Image to Text"
PLACEHOLDER_TEXT = "No photo selected.\nChoose, take or snip one to extract its text."
PROCESSING_TEXT = "Processing..."
BUSY_TEXT = "A photo is already being processed. Please wait or clear it first."


def pixmap_from_image(image: CapturedImage) -> Optional[QPixmap]:
    """Converts a captured bitmap to a QPixmap, or None if it cannot be shown."""
    try:
        bgr = prepare_for_recognition(image)
    except ImageDecodeError:
        return None
    rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    h, w, _ = rgb.shape
    # QImage does not own the buffer; copy() detaches it from the array.
    qimage = QImage(rgb.data, w, h, 3 * w, QImage.Format.Format_RGB888).copy()
    return QPixmap.fromImage(qimage)


class MainWindow(QWidget):
    """
    The application's only window.
    """

    def __init__(self, controller: PipelineController, image_sources: Dict[str, object],
                 preview_height: int = 300, copy_on_success: bool = False,
                 parent: QWidget = None):
        """
        Args:
            controller (PipelineController): The pipeline to drive and observe.
            image_sources (Dict[str, object]): Sources keyed by 'file',
                                               'camera' and 'screen'.
            preview_height (int): Height in pixels of the photo preview.
            copy_on_success (bool): Copy text to the clipboard once displayed.
            parent (QWidget, optional): The parent widget.
        """
        super().__init__(parent)
        self.controller = controller
        self.image_sources = image_sources
        self.preview_height = preview_height
        self.copy_on_success = copy_on_success
        self.alert: Optional[QMessageBox] = None
        self.snapshot: SessionSnapshot = controller.snapshot()

        self._setup_window_properties()
        self._setup_ui()

        self.controller.state_changed.connect(self.render)
        self.controller.selection_rejected.connect(self._on_selection_rejected)
        self.render(self.snapshot)

    def _setup_window_properties(self):
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(480, 640)
        self.setStyleSheet("""
            QWidget {
                background-color: #2E2E2E;
                color: #E0E0E0;
                font-family: sans-serif;
            }
            QPlainTextEdit, QLabel#preview {
                background-color: #3A3A3A;
                border: 1px solid #555555;
                border-radius: 10px;
                padding: 8px;
            }
            QPushButton {
                background-color: #444444;
                border: 1px solid #555555;
                border-radius: 5px;
                padding: 6px 10px;
            }
            QPushButton:disabled {
                color: #777777;
            }
        """)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        title_label = QLabel(WINDOW_TITLE)
        title_font = QFont()
        title_font.setBold(True)
        title_font.setPointSize(13)
        title_label.setFont(title_font)
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        self.preview_label = QLabel()
        self.preview_label.setObjectName("preview")
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setFixedHeight(self.preview_height)
        layout.addWidget(self.preview_label)

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 0)  # Busy indicator
        self.progress_bar.setFormat(PROCESSING_TEXT)
        self.progress_bar.setTextVisible(True)
        layout.addWidget(self.progress_bar)

        self.status_label = QLabel()
        status_font = QFont()
        status_font.setPointSize(8)
        status_font.setItalic(True)
        self.status_label.setFont(status_font)
        self.status_label.setStyleSheet("color: #AAAAAA;")
        layout.addWidget(self.status_label)

        separator = QFrame()
        separator.setFrameShape(QFrame.Shape.HLine)
        separator.setFrameShadow(QFrame.Shadow.Sunken)
        layout.addWidget(separator)

        self.text_view = QPlainTextEdit()
        self.text_view.setReadOnly(True)
        self.text_view.setPlaceholderText("Recognized text will appear here.")
        layout.addWidget(self.text_view, stretch=1)

        source_row = QHBoxLayout()
        self.choose_button = QPushButton("Choose Photo")
        self.choose_button.clicked.connect(lambda: self.start_selection(SOURCE_FILE))
        self.camera_button = QPushButton("Take Photo")
        self.camera_button.clicked.connect(lambda: self.start_selection(SOURCE_CAMERA))
        self.snip_button = QPushButton("Snip Screen")
        self.snip_button.clicked.connect(lambda: self.start_selection(SOURCE_SCREEN))
        for button in (self.choose_button, self.camera_button, self.snip_button):
            source_row.addWidget(button)
        layout.addLayout(source_row)

        action_row = QHBoxLayout()
        self.copy_button = QPushButton("Copy Text")
        self.copy_button.clicked.connect(self.copy_text)
        self.clear_button = QPushButton("Clear")
        self.clear_button.setStyleSheet("color: #FF6B6B;")
        self.clear_button.clicked.connect(self.controller.clear)
        action_row.addWidget(self.copy_button)
        action_row.addWidget(self.clear_button)
        layout.addLayout(action_row)

    # --- User actions ---

    def start_selection(self, source_kind: str) -> bool:
        source = self.image_sources.get(source_kind)
        if source is None:
            logger.error(f"No image source registered for '{source_kind}'.")
            return False
        return self.controller.start_selection(source)

    def copy_text(self) -> bool:
        return copy_to_clipboard(self.snapshot.display_text)

    # --- Rendering ---

    def render(self, snapshot: SessionSnapshot):
        """Brings every widget in line with `snapshot`."""
        self.snapshot = snapshot
        state = snapshot.state
        busy = state in (SessionState.AWAITING_IMAGE, SessionState.PROCESSING)

        self._render_preview()
        self.progress_bar.setVisible(state is SessionState.PROCESSING)
        self.text_view.setPlainText(snapshot.display_text)
        self.status_label.setText(self._status_text(snapshot))

        for button in (self.choose_button, self.camera_button, self.snip_button):
            button.setEnabled(not busy)
        self.copy_button.setEnabled(state is SessionState.DISPLAYING)
        self.clear_button.setEnabled(snapshot.has_image or state is not SessionState.IDLE)

        if state is SessionState.FAILED:
            self._show_alert(snapshot.error_message)
        elif state is SessionState.DISPLAYING and self.copy_on_success:
            self.copy_text()

    def _render_preview(self):
        image = self.controller.current_image
        pixmap = pixmap_from_image(image) if image is not None else None
        if pixmap is None:
            self.preview_label.setPixmap(QPixmap())
            self.preview_label.setText(PLACEHOLDER_TEXT if image is None else "Preview unavailable.")
            return
        self.preview_label.setPixmap(pixmap.scaledToHeight(
            self.preview_height - 20, Qt.TransformationMode.SmoothTransformation
        ))

    @staticmethod
    def _status_text(snapshot: SessionSnapshot) -> str:
        if snapshot.state is SessionState.AWAITING_IMAGE:
            return "Waiting for a photo..."
        if snapshot.state is SessionState.PROCESSING:
            return "Recognizing text..."
        if snapshot.state is SessionState.DISPLAYING:
            lines = snapshot.display_text.count("\n") + 1
            return f"{lines} line(s) recognized."
        if snapshot.state is SessionState.FAILED:
            return snapshot.error_message
        return ""

    def _show_alert(self, message: str):
        # open() rather than exec(): the event loop keeps running.
        if self.alert is not None:
            self.alert.close()
        self.alert = QMessageBox(QMessageBox.Icon.Warning, "Error", message,
                                 QMessageBox.StandardButton.Ok, self)
        self.alert.open()

    def _on_selection_rejected(self, _state):
        self.status_label.setText(BUSY_TEXT)
