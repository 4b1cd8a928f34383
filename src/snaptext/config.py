# -*- coding: utf-8 -*-
"""
src/snaptext/config.py

Module for handling application configuration.

Defaults for SnapText (recognition languages, default image source, camera
device, display behaviour) are overridden by the user's config.ini, which
is created with default values on the first run.
"""

import configparser
import logging
import os
import platform
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "SnapText"
DEFAULT_CONFIG_FILENAME = "config.ini"
HOME_ENV_VAR = "SNAPTEXT_HOME"
IMAGE_SOURCES = ("file", "camera", "screen")


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - $SNAPTEXT_HOME if set
    - Windows: %APPDATA%/SnapText
    - macOS: ~/Library/Application Support/SnapText
    - Linux: ~/.config/SnapText
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    if platform.system() == "Windows":
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    return Path.home() / ".config" / APP_NAME


class Config:
    """
    Loads defaults and overrides them with settings from a user-specific
    config file.
    """

    def __init__(self, app_dir: Path = None):
        self.parser = configparser.ConfigParser()
        self.app_dir = Path(app_dir) if app_dir else get_app_dir()
        self.config_file_path = self.app_dir / DEFAULT_CONFIG_FILENAME

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        self.parser["General"] = {
            "log_level": "INFO",
            "default_source": "file",
        }
        self.parser["Recognition"] = {
            "languages": "en",
            "gpu": "False",
            "confidence_threshold": "0.0",
        }
        self.parser["Camera"] = {
            "device_index": "0",
        }
        self.parser["Display"] = {
            "copy_on_success": "False",
            "preview_height": "300",
        }

    def _load_from_file(self):
        if not self.config_file_path.exists():
            self._save_defaults()
            return
        try:
            self.parser.read(self.config_file_path)
        except configparser.Error as e:
            logger.error(f"Could not parse {self.config_file_path}, using defaults: {e}")
            self.parser = configparser.ConfigParser()
            self._load_defaults()

    def _save_defaults(self):
        try:
            self.app_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w') as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. Restart the app for changes to take effect.\n\n")
                self.parser.write(configfile)
        except OSError as e:
            # Non-critical: the defaults stay in effect for this run.
            logger.error(f"Could not write config file at {self.config_file_path}: {e}")

    def _typed(self, getter, section: str, option: str, default):
        """Reads a typed option, logging and returning `default` if it does not parse."""
        try:
            return getter(section, option, fallback=default)
        except ValueError as e:
            logger.warning(f"Invalid value for [{section}] {option}, using {default!r}: {e}")
            return default

    # --- Typed accessors ---

    @property
    def log_level(self) -> str:
        return self.parser.get("General", "log_level", fallback="INFO").upper()

    @property
    def default_source(self) -> str:
        """Image source used by start_selection() when none is given."""
        source = self.parser.get("General", "default_source", fallback="file").strip().lower()
        if source not in IMAGE_SOURCES:
            logger.warning(f"Unknown default_source '{source}', falling back to 'file'.")
            return "file"
        return source

    @property
    def languages(self) -> List[str]:
        """Language codes handed to EasyOCR."""
        raw = self.parser.get("Recognition", "languages", fallback="en")
        languages = [code.strip() for code in raw.split(",") if code.strip()]
        return languages or ["en"]

    @property
    def gpu(self) -> bool:
        return self._typed(self.parser.getboolean, "Recognition", "gpu", False)

    @property
    def confidence_threshold(self) -> float:
        """Minimum EasyOCR confidence (0.0-1.0) for a line to be kept."""
        return self._typed(self.parser.getfloat, "Recognition", "confidence_threshold", 0.0)

    @property
    def camera_index(self) -> int:
        return self._typed(self.parser.getint, "Camera", "device_index", 0)

    @property
    def copy_on_success(self) -> bool:
        """Copy recognized text to the clipboard as soon as it is displayed."""
        return self._typed(self.parser.getboolean, "Display", "copy_on_success", False)

    @property
    def preview_height(self) -> int:
        return self._typed(self.parser.getint, "Display", "preview_height", 300)
