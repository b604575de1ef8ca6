"""Pipeline orchestration module."""

from .heartbeat_pipeline import HeartbeatPipeline, count_lines

__all__ = ["HeartbeatPipeline", "count_lines"]
