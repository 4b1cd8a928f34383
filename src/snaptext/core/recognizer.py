# -*- coding: utf-8 -*-
"""
src/snaptext/core/recognizer.py

Text recognition backed by EasyOCR.

The recognizer is an opaque collaborator of the pipeline: it takes a
prepared BGR bitmap, works on a background thread, and reports back through
a callback exactly once, with either the recognized lines or an exception.
The callback runs on the worker thread; marshalling back to the GUI thread
is the caller's business.
"""

import logging
import threading
from typing import Callable, List, Optional, Sequence, Union

import easyocr
import numpy as np

from .errors import RecognitionError

logger = logging.getLogger(__name__)

RecognitionCallback = Callable[[Union[List[str], Exception]], None]


class EasyOcrRecognizer:
    """
    Runs EasyOCR on a daemon thread per request.

    Loading the EasyOCR model takes seconds, so the reader is created on the
    first request (inside the worker, off the GUI thread) and reused.
    """

    def __init__(self, languages: Sequence[str] = None, gpu: bool = False,
                 confidence_threshold: float = 0.0):
        self.languages = list(languages) if languages else ['en']
        self.gpu = gpu
        self.confidence_threshold = confidence_threshold
        self.reader: Optional[easyocr.Reader] = None
        # Serializes reader creation and readtext calls; a worker orphaned by
        # clear() may still be running when the next request starts.
        self._reader_lock = threading.Lock()

    def _get_reader(self) -> easyocr.Reader:
        # Caller holds _reader_lock.
        if self.reader is None:
            logger.info(f"Initializing EasyOCR Reader for languages: {self.languages}...")
            self.reader = easyocr.Reader(self.languages, gpu=self.gpu)
            logger.info("EasyOCR Reader initialized successfully.")
        return self.reader

    def recognize(self, pixels: np.ndarray, callback: RecognitionCallback) -> threading.Thread:
        """Starts recognition on a worker thread and returns that thread."""
        worker = threading.Thread(
            target=self._run,
            args=(pixels, callback),
            name="snaptext-ocr",
            daemon=True,
        )
        worker.start()
        return worker

    def recognize_sync(self, pixels: np.ndarray) -> List[str]:
        """
        Recognizes text on the calling thread.

        Returns:
            The text of every accepted detection, in the order EasyOCR
            returned them.

        Raises:
            RecognitionError: If the reader cannot be created, readtext fails
                              or returns detections of an unexpected shape.
        """
        try:
            with self._reader_lock:
                reader = self._get_reader()
                detections = reader.readtext(pixels, detail=1, paragraph=False)
            return self._filter(detections)
        except Exception as e:
            raise RecognitionError(str(e), cause=e) from e

    def _run(self, pixels: np.ndarray, callback: RecognitionCallback):
        try:
            outcome = self.recognize_sync(pixels)
            logger.info(f"Recognition finished with {len(outcome)} line(s).")
        except RecognitionError as e:
            logger.error(f"An error occurred during OCR processing: {e}")
            outcome = e
        callback(outcome)

    def _filter(self, detections) -> List[str]:
        lines = []
        for (_bbox, text, conf) in detections:
            if not text or not text.strip():
                continue
            if conf >= self.confidence_threshold:
                lines.append(text)
                logger.debug(f"Accepted line: '{text}' with confidence {conf:.2f}")
            else:
                logger.debug(f"Rejected line: '{text}' with confidence {conf:.2f}")
        return lines
