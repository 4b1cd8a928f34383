"""
SnapText Application Package.

Pick, photograph or snip an image, run OCR on it and display the text.

The main application class is re-exported here so the entry point can do
`from snaptext import SnapTextApp`.
"""

__version__ = "0.1.0"

from .app import SnapTextApp

__all__ = ["SnapTextApp"]
