"""Tests for the image source adapters."""

from __future__ import annotations

import cv2
import numpy as np
import pytest

from snaptext.gui import image_sources
from snaptext.gui.image_sources import (
    CameraImageSource,
    FileImageSource,
    ScreenImageSource,
    create_image_source,
)


class DummyCapture:
    def __init__(self, frames, opened=True) -> None:
        self.frames = list(frames)
        self.opened = opened
        self.released = False

    def isOpened(self):
        return self.opened

    def read(self):
        if self.frames:
            return True, self.frames.pop(0)
        return False, None

    def release(self):
        self.released = True


def test_file_source_cancel(qapp, monkeypatch):
    monkeypatch.setattr(
        image_sources.QFileDialog, "getOpenFileName", staticmethod(lambda *args: ("", ""))
    )
    received = []

    FileImageSource().request_image(received.append)

    assert received == [None]


def test_file_source_decodes_selected_file(qapp, monkeypatch, tmp_path):
    path = tmp_path / "receipt.png"
    cv2.imwrite(str(path), np.full((10, 12, 3), 255, dtype=np.uint8))
    monkeypatch.setattr(
        image_sources.QFileDialog,
        "getOpenFileName",
        staticmethod(lambda *args: (str(path), "Images")),
    )
    received = []

    FileImageSource().request_image(received.append)

    assert len(received) == 1
    assert received[0].origin == str(path)
    assert (received[0].width, received[0].height) == (12, 10)


def test_camera_source_delivers_last_warmup_frame(monkeypatch):
    frames = [np.full((4, 4, 3), i, dtype=np.uint8) for i in range(CameraImageSource.WARMUP_FRAMES)]
    capture = DummyCapture(frames)
    monkeypatch.setattr(image_sources.cv2, "VideoCapture", lambda index: capture)
    received = []

    CameraImageSource(device_index=1).request_image(received.append).join(timeout=5)

    assert len(received) == 1
    assert received[0].origin == "camera:1"
    assert received[0].pixels[0, 0, 0] == CameraImageSource.WARMUP_FRAMES - 1
    assert capture.released is True


@pytest.mark.parametrize("capture", [DummyCapture([], opened=False), DummyCapture([])])
def test_camera_source_without_frame_cancels(monkeypatch, capture):
    monkeypatch.setattr(image_sources.cv2, "VideoCapture", lambda index: capture)
    received = []

    CameraImageSource().request_image(received.append).join(timeout=5)

    assert received == [None]
    assert capture.released is True


def test_screen_source_overlay_cancel_delivers_none(qapp):
    received = []
    source = ScreenImageSource()

    source.request_image(received.append)
    source.overlay.capture_cancelled.emit()
    source.overlay.close()

    assert received == [None]


def test_screen_source_delivers_grab(qapp):
    received = []
    source = ScreenImageSource()

    source.request_image(received.append)
    overlay = source.overlay
    overlay.image_captured.emit(np.zeros((6, 8, 4), dtype=np.uint8))
    overlay.close()

    assert len(received) == 1
    assert received[0].origin == "screen"
    assert received[0].width == 8


def test_create_image_source():
    assert isinstance(create_image_source("camera", camera_index=3), CameraImageSource)
    assert create_image_source("camera", camera_index=3).device_index == 3
    assert isinstance(create_image_source("screen"), ScreenImageSource)
    assert isinstance(create_image_source("file"), FileImageSource)
    with pytest.raises(ValueError):
        create_image_source("scanner")
