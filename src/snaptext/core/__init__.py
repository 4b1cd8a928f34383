# -*- coding: utf-8 -*-
"""
The Core Processing Package for SnapText.

- `session`: data model of one pick -> recognize -> display session.
- `image_processor`: decoding and format preparation of picked images.
- `recognizer`: the EasyOCR-backed text recognizer.
- `pipeline`: the controller state machine tying it all together.
"""

from .errors import ImageDecodeError, RecognitionError, SnapTextError
from .pipeline import PipelineController
from .recognizer import EasyOcrRecognizer
from .session import (
    CapturedImage,
    ErrorKind,
    RecognitionResult,
    SessionSnapshot,
    SessionState,
)

__all__ = [
    "CapturedImage",
    "EasyOcrRecognizer",
    "ErrorKind",
    "ImageDecodeError",
    "PipelineController",
    "RecognitionError",
    "RecognitionResult",
    "SessionSnapshot",
    "SessionState",
    "SnapTextError",
]
