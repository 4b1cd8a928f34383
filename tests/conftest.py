from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Widgets must be creatable on headless CI machines.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from PyQt6.QtWidgets import QApplication  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config files out of the real user profile."""
    monkeypatch.setenv("SNAPTEXT_HOME", str(tmp_path / "home"))
