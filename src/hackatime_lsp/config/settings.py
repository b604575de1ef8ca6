"""Configuration management for the Hackatime language server.

This module holds the runtime tunables for the heartbeat pipeline and allows
environment variable overrides, the same way for every component.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

from .wakatime_cfg import default_config_path, default_log_path


def _default_audit_log_path() -> Optional[Path]:
    try:
        return Path.home() / "hackatime-zed.log"
    except RuntimeError:
        return None


@dataclass
class HackatimeConfig:
    """Complete Hackatime language server configuration."""

    # External reporting tool
    wakatime_cli_path: str = ""
    cli_timeout_seconds: float = 10.0

    # Heartbeat metadata
    plugin_name: str = "Zed"
    category: str = "coding"

    # Pipeline settings
    debounce_ms: int = 50
    batch_send_seconds: float = 120.0
    max_queue_size: int = 100

    # Files owned by the reporting tool
    wakatime_config_path: Optional[Path] = field(default_factory=default_config_path)
    wakatime_log_path: Optional[Path] = field(default_factory=default_log_path)

    # Local files
    audit_log_path: Optional[Path] = field(default_factory=_default_audit_log_path)
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # System information
    platform: str = field(default_factory=lambda: platform.system().lower())

    def __post_init__(self):
        """Apply environment variable overrides."""
        self._apply_env_overrides()

    @property
    def is_windows(self) -> bool:
        return self.platform == "windows"

    def _apply_env_overrides(self):
        """Apply configuration overrides from environment variables."""
        if cli_path := os.getenv("HACKATIME_CLI_PATH"):
            self.wakatime_cli_path = cli_path

        if plugin_name := os.getenv("HACKATIME_PLUGIN"):
            self.plugin_name = plugin_name

        if debounce_ms := os.getenv("HACKATIME_DEBOUNCE_MS"):
            try:
                self.debounce_ms = int(debounce_ms)
            except ValueError:
                logger.warning(f"Invalid debounce window: {debounce_ms}")

        if batch_send := os.getenv("HACKATIME_BATCH_SEND_SECONDS"):
            try:
                self.batch_send_seconds = float(batch_send)
            except ValueError:
                logger.warning(f"Invalid batch send interval: {batch_send}")

        if max_queue_size := os.getenv("HACKATIME_MAX_QUEUE_SIZE"):
            try:
                self.max_queue_size = int(max_queue_size)
            except ValueError:
                logger.warning(f"Invalid max queue size: {max_queue_size}")

        if cli_timeout := os.getenv("HACKATIME_CLI_TIMEOUT"):
            try:
                self.cli_timeout_seconds = float(cli_timeout)
            except ValueError:
                logger.warning(f"Invalid CLI timeout: {cli_timeout}")

        # Paths
        if audit_log := os.getenv("HACKATIME_AUDIT_LOG"):
            self.audit_log_path = Path(audit_log)

        if log_file := os.getenv("HACKATIME_LOG_FILE"):
            self.log_file = Path(log_file)

        if log_level := os.getenv("HACKATIME_LOG_LEVEL"):
            self.log_level = log_level.upper()

    def validate(self) -> tuple[bool, list[str]]:
        """Validate the configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if not self.wakatime_cli_path:
            errors.append("wakatime-cli path is required")

        if self.debounce_ms < 0:
            errors.append("Debounce window must not be negative")

        if self.batch_send_seconds <= 0:
            errors.append("Batch send interval must be positive")

        if self.max_queue_size <= 0:
            errors.append("Max queue size must be positive")

        if self.cli_timeout_seconds <= 0:
            errors.append("CLI timeout must be positive")

        return len(errors) == 0, errors
