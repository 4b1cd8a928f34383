"""Tests for the EasyOCR recognizer adapter, with the reader faked out."""

from __future__ import annotations

import threading
import time

import numpy as np
import pytest

from snaptext.core.errors import RecognitionError
from snaptext.core.recognizer import EasyOcrRecognizer

BOX = [[0, 0], [10, 0], [10, 5], [0, 5]]


class DummyReader:
    def __init__(self, detections=None, error=None) -> None:
        self.detections = detections or []
        self.error = error
        self.calls = []

    def readtext(self, image, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.detections


def _recognizer(reader, **kwargs) -> EasyOcrRecognizer:
    recognizer = EasyOcrRecognizer(**kwargs)
    recognizer.reader = reader
    return recognizer


def test_lines_keep_reader_order():
    reader = DummyReader([(BOX, "Hello", 0.9), (BOX, "World", 0.8)])

    lines = _recognizer(reader).recognize_sync(np.zeros((5, 5, 3), dtype=np.uint8))

    assert lines == ["Hello", "World"]
    assert reader.calls == [{"detail": 1, "paragraph": False}]


def test_low_confidence_and_blank_detections_are_dropped():
    reader = DummyReader([(BOX, "keep", 0.7), (BOX, "drop", 0.2), (BOX, "   ", 0.99)])

    lines = _recognizer(reader, confidence_threshold=0.5).recognize_sync(np.zeros((5, 5, 3)))

    assert lines == ["keep"]


def test_default_threshold_keeps_everything():
    reader = DummyReader([(BOX, "faint", 0.01)])

    assert _recognizer(reader).recognize_sync(np.zeros((5, 5, 3))) == ["faint"]


def test_reader_failure_is_wrapped():
    cause = RuntimeError("CUDA not available")
    recognizer = _recognizer(DummyReader(error=cause))

    with pytest.raises(RecognitionError, match="CUDA not available") as excinfo:
        recognizer.recognize_sync(np.zeros((5, 5, 3)))

    assert excinfo.value.cause is cause


def test_reader_is_created_lazily_and_reused(monkeypatch):
    created = []

    def fake_reader(languages, gpu):
        created.append((tuple(languages), gpu))
        return DummyReader([(BOX, "x", 1.0)])

    monkeypatch.setattr("snaptext.core.recognizer.easyocr.Reader", fake_reader)
    recognizer = EasyOcrRecognizer(languages=["en", "fr"], gpu=False)
    assert created == []

    recognizer.recognize_sync(np.zeros((5, 5, 3)))
    recognizer.recognize_sync(np.zeros((5, 5, 3)))

    assert created == [(("en", "fr"), False)]


def test_recognize_calls_back_once_from_worker_thread():
    outcomes = []
    threads = []

    def callback(outcome):
        outcomes.append(outcome)
        threads.append(threading.current_thread())

    worker = _recognizer(DummyReader([(BOX, "async", 0.9)])).recognize(np.zeros((5, 5, 3)), callback)
    worker.join(timeout=5)

    assert outcomes == [["async"]]
    assert threads[0] is not threading.main_thread()


def test_recognize_reports_errors_through_callback():
    outcomes = []

    worker = _recognizer(DummyReader(error=ValueError("bad input"))).recognize(
        np.zeros((5, 5, 3)), outcomes.append
    )
    worker.join(timeout=5)

    assert len(outcomes) == 1
    assert isinstance(outcomes[0], RecognitionError)


def test_malformed_detection_is_reported_through_callback():
    outcomes = []

    worker = _recognizer(DummyReader([("only", "two")])).recognize(np.zeros((5, 5, 3)), outcomes.append)
    worker.join(timeout=5)

    assert len(outcomes) == 1
    assert isinstance(outcomes[0], RecognitionError)


def test_readtext_calls_are_serialized():
    active = []
    peak = []

    class SlowReader:
        def readtext(self, image, **kwargs):
            active.append(1)
            peak.append(len(active))
            time.sleep(0.05)
            active.pop()
            return [(BOX, "x", 1.0)]

    recognizer = _recognizer(SlowReader())
    outcomes = []

    workers = [recognizer.recognize(np.zeros((5, 5, 3)), outcomes.append) for _ in range(3)]
    for worker in workers:
        worker.join(timeout=5)

    assert outcomes == [["x"], ["x"], ["x"]]
    assert max(peak) == 1
