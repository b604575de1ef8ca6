"""Event throttling module."""

from .event_throttle import EventThrottle, ThrottleConfig

__all__ = ["EventThrottle", "ThrottleConfig"]
