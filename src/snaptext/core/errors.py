# -*- coding: utf-8 -*-
"""
src/snaptext/core/errors.py

Exception types raised by the SnapText processing pipeline.
"""


class SnapTextError(Exception):
    """Base class for all SnapText pipeline errors."""


class ImageDecodeError(SnapTextError):
    """The picked image could not be prepared in the format the recognizer needs."""


class RecognitionError(SnapTextError):
    """The OCR engine failed while recognizing text."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause
