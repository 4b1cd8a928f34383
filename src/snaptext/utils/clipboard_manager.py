# -*- coding: utf-8 -*-
"""
src/snaptext/utils/clipboard_manager.py

Copies recognized text to the system clipboard via 'pyperclip'.
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(text: str) -> bool:
    """
    Copies `text` to the system clipboard.

    Returns:
        bool: True on success. False if there was nothing to copy or the
              platform has no usable clipboard mechanism.
    """
    if not text:
        logger.debug("Nothing to copy to the clipboard.")
        return False
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        # Linux without xclip/xsel/wl-clipboard ends up here.
        logger.error(f"Failed to copy text to clipboard: {e}")
        return False
    logger.info(f"Copied {len(text)} characters to the clipboard.")
    return True
