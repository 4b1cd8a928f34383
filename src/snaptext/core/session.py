# -*- coding: utf-8 -*-
"""
src/snaptext/core/session.py

Data model for a single pick -> recognize -> display session.

The pipeline controller owns exactly one `Session`. The display layer never
touches it directly; it only receives immutable `SessionSnapshot` tuples.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Sequence, Tuple

import numpy as np

LINE_SEPARATOR = "\n"


class SessionState(Enum):
    IDLE = "idle"
    AWAITING_IMAGE = "awaiting_image"
    PROCESSING = "processing"
    DISPLAYING = "displaying"
    FAILED = "failed"


class ErrorKind(Enum):
    # Cancellation is not a failure: it returns the session to Idle and is
    # never stored as error_kind.
    CANCELLED = "cancelled"
    DECODE_ERROR = "decode_error"
    RECOGNITION_ERROR = "recognition_error"
    NO_TEXT_FOUND = "no_text_found"


@dataclass
class CapturedImage:
    """
    A decoded bitmap delivered by an image source.

    `pixels` is None when the source handed over something it could not
    decode (e.g. a corrupt file); the controller reports that as a decode
    error instead of calling the recognizer.
    """
    pixels: Optional[np.ndarray]
    origin: str = ""

    @property
    def width(self) -> int:
        if self.pixels is None or self.pixels.ndim < 2:
            return 0
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        if self.pixels is None or self.pixels.ndim < 2:
            return 0
        return int(self.pixels.shape[0])

    def release(self):
        """Drops the reference to the pixel buffer."""
        self.pixels = None


@dataclass(frozen=True)
class RecognitionResult:
    """Recognized lines, in the order the recognizer returned them."""
    lines: Tuple[str, ...]

    @classmethod
    def from_fragments(cls, fragments: Sequence[str]) -> "RecognitionResult":
        return cls(lines=tuple(fragments))

    @property
    def text(self) -> str:
        return LINE_SEPARATOR.join(self.lines)


class SessionSnapshot(NamedTuple):
    """What the display layer receives whenever the session changes."""
    state: SessionState
    display_text: str
    error_message: str
    error_kind: Optional[ErrorKind] = None
    has_image: bool = False


@dataclass
class Session:
    """Mutable session record, confined to the controller's thread."""
    state: SessionState = SessionState.IDLE
    image: Optional[CapturedImage] = None
    result: Optional[RecognitionResult] = None
    error_kind: Optional[ErrorKind] = None
    error_message: str = ""
    request_id: int = field(default=0)

    def release_image(self):
        if self.image is not None:
            self.image.release()
        self.image = None

    def reset(self):
        """Releases every entity and returns to Idle. The request counter is kept."""
        self.release_image()
        self.result = None
        self.error_kind = None
        self.error_message = ""
        self.state = SessionState.IDLE

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            display_text=self.result.text if self.result is not None else "",
            error_message=self.error_message,
            error_kind=self.error_kind,
            has_image=self.image is not None,
        )
