"""Core heartbeat components."""

from .cursor_tracker import CursorTracker
from .heartbeat import EventType, Heartbeat, now_millis
from .uris import clean_file_uri, is_virtual_uri

__all__ = [
    "CursorTracker",
    "EventType",
    "Heartbeat",
    "clean_file_uri",
    "is_virtual_uri",
    "now_millis",
]
