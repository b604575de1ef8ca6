"""Hackatime LSP - editor activity heartbeats reported through wakatime-cli."""

__version__ = "0.1.0"

from .config import HackatimeConfig
from .orchestrator import HeartbeatPipeline

__all__ = ["HackatimeConfig", "HeartbeatPipeline", "__version__"]
