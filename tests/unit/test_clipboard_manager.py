"""Tests for the clipboard helper."""

from __future__ import annotations

import pyperclip

from snaptext.utils import clipboard_manager


def test_copy_success(monkeypatch):
    copied = []
    monkeypatch.setattr(clipboard_manager.pyperclip, "copy", copied.append)

    assert clipboard_manager.copy_to_clipboard("Hello\nWorld") is True
    assert copied == ["Hello\nWorld"]


def test_copy_without_clipboard_mechanism(monkeypatch):
    def unavailable(_text):
        raise pyperclip.PyperclipException("no xclip")

    monkeypatch.setattr(clipboard_manager.pyperclip, "copy", unavailable)

    assert clipboard_manager.copy_to_clipboard("text") is False


def test_empty_text_is_not_copied(monkeypatch):
    copied = []
    monkeypatch.setattr(clipboard_manager.pyperclip, "copy", copied.append)

    assert clipboard_manager.copy_to_clipboard("") is False
    assert copied == []
