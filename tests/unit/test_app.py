"""Tests for the application shell wiring."""

from __future__ import annotations

import logging

from snaptext.app import SnapTextApp, configure_logging
from snaptext.config import Config
from snaptext.core.recognizer import EasyOcrRecognizer
from snaptext.core.session import SessionState
from snaptext.gui.image_sources import CameraImageSource, FileImageSource, ScreenImageSource

from .fakes import FakeRecognizer, make_image


def test_app_wires_sources_controller_and_window(qapp, tmp_path):
    (tmp_path / "config.ini").write_text(
        "[General]\ndefault_source = camera\n[Camera]\ndevice_index = 4\n"
    )
    recognizer = FakeRecognizer()

    shell = SnapTextApp(qapp, config=Config(app_dir=tmp_path), recognizer=recognizer)

    assert isinstance(shell.image_sources["file"], FileImageSource)
    assert isinstance(shell.image_sources["screen"], ScreenImageSource)
    assert shell.controller.image_source is shell.image_sources["camera"]
    assert shell.image_sources["camera"].device_index == 4
    assert shell.image_sources["file"].parent is shell.window
    assert shell.window.controller is shell.controller
    shell.window.close()


def test_app_builds_easyocr_recognizer_from_config(qapp, tmp_path):
    (tmp_path / "config.ini").write_text(
        "[Recognition]\nlanguages = en,ja\ngpu = true\nconfidence_threshold = 0.3\n"
    )

    shell = SnapTextApp(qapp, config=Config(app_dir=tmp_path))

    assert isinstance(shell.recognizer, EasyOcrRecognizer)
    assert shell.recognizer.languages == ["en", "ja"]
    assert shell.recognizer.gpu is True
    assert shell.recognizer.confidence_threshold == 0.3
    # The model is not loaded until the first recognition.
    assert shell.recognizer.reader is None
    shell.window.close()


def test_quit_clears_session(qapp, tmp_path):
    recognizer = FakeRecognizer()
    shell = SnapTextApp(qapp, config=Config(app_dir=tmp_path), recognizer=recognizer)
    source = shell.controller.image_source
    callbacks = []
    source.request_image = callbacks.append

    shell.controller.start_selection()
    callbacks[0](make_image())
    shell.quit_app()

    assert shell.controller.state is SessionState.IDLE
    assert shell.controller.current_image is None
    shell.window.close()


def test_configure_logging_accepts_unknown_level(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("verbose")
    configure_logging("debug")

    assert calls[0]["level"] == logging.INFO
    assert calls[1]["level"] == logging.DEBUG


def test_app_starts_with_malformed_config_values(qapp, tmp_path):
    (tmp_path / "config.ini").write_text(
        "[Recognition]\ngpu = maybe\n[Display]\npreview_height = tall\n"
    )

    shell = SnapTextApp(qapp, config=Config(app_dir=tmp_path), recognizer=FakeRecognizer())

    assert shell.window.preview_height == 300
    shell.window.close()
