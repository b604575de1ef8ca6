"""Read-only access to the WakaTime ``key = value`` configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger


def default_config_path() -> Optional[Path]:
    """Return ``~/.wakatime.cfg``, or None if the home directory is unknown."""
    try:
        return Path.home() / ".wakatime.cfg"
    except RuntimeError:
        return None


def default_log_path() -> Optional[Path]:
    """Return ``~/.wakatime/wakatime.log``, or None if the home directory is unknown."""
    try:
        return Path.home() / ".wakatime" / "wakatime.log"
    except RuntimeError:
        return None


class WakatimeConfigReader:
    """Looks up single keys in the WakaTime configuration file.

    The file is re-read on every lookup so edits made while the server runs
    are picked up. Any read error means the value is absent.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path if config_path is not None else default_config_path()

    def get(self, key: str) -> str:
        """Return the first value stored under ``key``, or ``""``."""
        if self.config_path is None:
            return ""

        try:
            text = self.config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Could not read {self.config_path}: {e}")
            return ""

        for line in text.split("\n"):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            name, sep, value = line.partition("=")
            if sep and name.strip() == key:
                return value.strip()

        return ""

    @property
    def api_key(self) -> str:
        return self.get("apiKey")

    @property
    def api_url(self) -> str:
        return self.get("apiUrl")
