# -*- coding: utf-8 -*-
"""
src/snaptext/core/pipeline.py

The pipeline controller: the state machine between image source, text
recognizer and display.

    Idle -> AwaitingImage -> Processing -> Displaying | Failed
    clear() returns to Idle from any state.

Image sources and the recognizer call back from whatever thread they run
on. The public callbacks only emit a signal; Qt delivers it to the slot on
the thread the controller lives on (queued when coming from another
thread, direct when already there), so every session mutation happens on
the GUI thread.

A new selection is rejected while one is already waiting for an image or
being recognized. Each request carries a token; callbacks whose token is
no longer current (the session was cleared in the meantime) are dropped.
"""

import logging
from functools import partial
from typing import List, Optional, Union

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from .errors import ImageDecodeError
from .image_processor import prepare_for_recognition
from .session import (
    CapturedImage,
    ErrorKind,
    RecognitionResult,
    Session,
    SessionSnapshot,
    SessionState,
)

logger = logging.getLogger(__name__)

NO_TEXT_FOUND_MESSAGE = "No text found in the image."
DECODE_ERROR_MESSAGE = "Unable to prepare the image for recognition: {detail}"
RECOGNITION_ERROR_MESSAGE = "Unable to perform the recognition: {cause}"

BUSY_STATES = (SessionState.AWAITING_IMAGE, SessionState.PROCESSING)


class PipelineController(QObject):
    """
    Orchestrates the single in-flight recognition workflow.

    Signals:
        state_changed (SessionSnapshot): Emitted after every transition.
        selection_rejected (SessionState): Emitted when start_selection()
            is called while a request is already in flight.
    """
    state_changed = pyqtSignal(object)
    selection_rejected = pyqtSignal(object)

    # Internal hops onto the controller's thread. Payload: (request_id, value).
    _image_delivered = pyqtSignal(int, object)
    _recognition_finished = pyqtSignal(int, object)

    def __init__(self, image_source, recognizer, parent: QObject = None):
        """
        Args:
            image_source: Default source; anything with request_image(callback).
            recognizer: Anything with recognize(pixels, callback).
            parent (QObject, optional): Qt parent.
        """
        super().__init__(parent)
        self.image_source = image_source
        self.recognizer = recognizer
        self.session = Session()

        self._image_delivered.connect(self._apply_image)
        self._recognition_finished.connect(self._apply_recognition)

    # --- Read-only view ---

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def current_image(self) -> Optional[CapturedImage]:
        return self.session.image

    def snapshot(self) -> SessionSnapshot:
        return self.session.snapshot()

    # --- User actions ---

    def start_selection(self, image_source=None) -> bool:
        """
        Asks an image source for a picture.

        Returns:
            bool: True if the request was issued, False if it was rejected
                  because a request is already in flight.
        """
        if self.session.state in BUSY_STATES:
            logger.warning(f"Selection rejected: session is {self.session.state.value}.")
            self.selection_rejected.emit(self.session.state)
            return False

        source = image_source if image_source is not None else self.image_source
        self.session.reset()
        self.session.request_id += 1
        request_id = self.session.request_id
        self._transition(SessionState.AWAITING_IMAGE)

        source.request_image(partial(self.on_image_received, request_id=request_id))
        return True

    def clear(self):
        """Releases image and result and returns to Idle. Safe from any state."""
        # Bumping the token orphans any callback still on its way.
        self.session.request_id += 1
        self.session.reset()
        self._transition(SessionState.IDLE)

    # --- Collaborator callbacks (any thread) ---

    def on_image_received(self, image: Optional[CapturedImage], request_id: int = None):
        """Completion callback for image sources. `None` means cancelled."""
        if request_id is None:
            request_id = self.session.request_id
        self._image_delivered.emit(request_id, image)

    def on_recognition_complete(self, outcome: Union[List[str], Exception], request_id: int = None):
        """Completion callback for the recognizer: a list of lines or an exception."""
        if request_id is None:
            request_id = self.session.request_id
        self._recognition_finished.emit(request_id, outcome)

    # --- Slots (controller thread) ---

    @pyqtSlot(int, object)
    def _apply_image(self, request_id: int, image: Optional[CapturedImage]):
        if not self._is_current(request_id, SessionState.AWAITING_IMAGE, "image"):
            return

        if image is None:
            logger.info("Image selection cancelled.")
            self.session.reset()
            self._transition(SessionState.IDLE)
            return

        self.session.image = image
        try:
            pixels = prepare_for_recognition(image)
        except ImageDecodeError as e:
            logger.error(f"Could not prepare image from '{image.origin}': {e}")
            self._fail(ErrorKind.DECODE_ERROR, DECODE_ERROR_MESSAGE.format(detail=e))
            return

        logger.info(f"Image received ({image.width}x{image.height}). Starting recognition...")
        self._transition(SessionState.PROCESSING)
        self.recognizer.recognize(pixels, partial(self.on_recognition_complete, request_id=request_id))

    @pyqtSlot(int, object)
    def _apply_recognition(self, request_id: int, outcome):
        if not self._is_current(request_id, SessionState.PROCESSING, "recognition result"):
            return

        if isinstance(outcome, Exception):
            self._fail(ErrorKind.RECOGNITION_ERROR, RECOGNITION_ERROR_MESSAGE.format(cause=outcome))
            return

        if not outcome:
            logger.warning("Recognizer returned no text.")
            self._fail(ErrorKind.NO_TEXT_FOUND, NO_TEXT_FOUND_MESSAGE)
            return

        self.session.result = RecognitionResult.from_fragments(outcome)
        logger.info(f"Recognized {len(self.session.result.lines)} line(s).")
        self._transition(SessionState.DISPLAYING)

    # --- Helpers ---

    def _is_current(self, request_id: int, expected: SessionState, what: str) -> bool:
        if request_id != self.session.request_id or self.session.state is not expected:
            logger.debug(
                f"Dropping stale {what} for request {request_id} "
                f"(current request {self.session.request_id}, state {self.session.state.value})."
            )
            return False
        return True

    def _fail(self, kind: ErrorKind, message: str):
        self.session.result = None
        self.session.error_kind = kind
        self.session.error_message = message
        logger.error(f"Pipeline failed ({kind.value}): {message}")
        self._transition(SessionState.FAILED)

    def _transition(self, new_state: SessionState):
        old_state = self.session.state
        self.session.state = new_state
        logger.info(f"Session state: {old_state.value} -> {new_state.value}")
        self.state_changed.emit(self.session.snapshot())
