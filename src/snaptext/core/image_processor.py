# -*- coding: utf-8 -*-
"""
src/snaptext/core/image_processor.py

Decoding and format preparation for images entering the pipeline.

Image sources deliver whatever they grabbed: an 8-bit BGR file decode, a
BGRA screen grab from mss, a grayscale scan. The recognizer wants one thing,
a contiguous 3-channel uint8 BGR array. This module does that conversion and
nothing else; enhancement (upscaling, thresholding, deskewing) is left to
the OCR engine.
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from .errors import ImageDecodeError
from .session import CapturedImage

logger = logging.getLogger(__name__)

# Images smaller than this on either side cannot carry legible glyphs.
MIN_IMAGE_SIDE = 2

IMAGE_FILE_PATTERNS = ("*.png", "*.jpg", "*.jpeg", "*.bmp", "*.tif", "*.tiff", "*.webp")


def decode_image_file(path: Union[str, Path]) -> CapturedImage:
    """
    Decodes an image file into a CapturedImage.

    A file OpenCV cannot read still yields a CapturedImage, with no pixels,
    so that the pipeline can report the failure as a decode error.
    """
    path = Path(path)
    # np.fromfile + imdecode handles non-ASCII paths that cv2.imread chokes on.
    try:
        raw = np.fromfile(str(path), dtype=np.uint8)
    except OSError as e:
        logger.error(f"Could not read image file '{path}': {e}")
        return CapturedImage(pixels=None, origin=str(path))

    pixels = cv2.imdecode(raw, cv2.IMREAD_UNCHANGED) if raw.size else None
    if pixels is None:
        logger.error(f"OpenCV could not decode '{path}'.")
    else:
        logger.info(f"Decoded '{path.name}' with shape {pixels.shape}.")
    return CapturedImage(pixels=pixels, origin=str(path))


def prepare_for_recognition(image: CapturedImage) -> np.ndarray:
    """
    Converts a captured image into a contiguous BGR uint8 array.

    Raises:
        ImageDecodeError: If the image has no pixel data, an unsupported
                          shape or channel count, or is too small.
    """
    if image is None or image.pixels is None:
        raise ImageDecodeError("the image contains no decodable pixel data")

    pixels = image.pixels
    if not isinstance(pixels, np.ndarray) or pixels.size == 0:
        raise ImageDecodeError("the image is empty")

    if pixels.ndim not in (2, 3):
        raise ImageDecodeError(f"unsupported array shape {pixels.shape}")

    h, w = pixels.shape[:2]
    if h < MIN_IMAGE_SIDE or w < MIN_IMAGE_SIDE:
        raise ImageDecodeError(f"the image is too small ({w}x{h})")

    pixels = _to_uint8(pixels)

    if pixels.ndim == 2:
        bgr = cv2.cvtColor(pixels, cv2.COLOR_GRAY2BGR)
    elif pixels.shape[2] == 1:
        bgr = cv2.cvtColor(pixels[:, :, 0], cv2.COLOR_GRAY2BGR)
    elif pixels.shape[2] == 3:
        bgr = pixels
    elif pixels.shape[2] == 4:
        # mss and PNGs with transparency come in as BGRA.
        bgr = cv2.cvtColor(pixels, cv2.COLOR_BGRA2BGR)
    else:
        raise ImageDecodeError(f"unsupported channel count {pixels.shape[2]}")

    logger.debug(f"Prepared {image.origin or 'image'} for recognition: {bgr.shape}")
    return np.ascontiguousarray(bgr)


def _to_uint8(pixels: np.ndarray) -> np.ndarray:
    """Brings 16-bit, float and boolean buffers into the 0-255 uint8 range."""
    if pixels.dtype == np.uint8:
        return pixels
    if pixels.dtype == np.bool_:
        return pixels.astype(np.uint8) * 255
    if pixels.dtype == np.uint16:
        return (pixels >> 8).astype(np.uint8)
    if np.issubdtype(pixels.dtype, np.floating):
        if not np.all(np.isfinite(pixels)):
            raise ImageDecodeError("the image contains non-finite values")
        if pixels.min() >= 0.0 and pixels.max() <= 1.0:
            pixels = pixels * 255.0
        return np.clip(pixels, 0, 255).astype(np.uint8)
    raise ImageDecodeError(f"unsupported pixel type {pixels.dtype}")
