# -*- coding: utf-8 -*-
"""
Helper utilities for SnapText.
"""

from .clipboard_manager import copy_to_clipboard

__all__ = ["copy_to_clipboard"]
