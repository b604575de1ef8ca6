"""Configuration module for the Hackatime language server."""

from .logger_config import setup_logging
from .settings import HackatimeConfig
from .wakatime_cfg import WakatimeConfigReader

__all__ = ["HackatimeConfig", "WakatimeConfigReader", "setup_logging"]
