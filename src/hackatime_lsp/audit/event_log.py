"""Append-only JSON-lines record of handled editor notifications.

Every change and save notification is written here before throttling, so the
file shows what the editor sent even when no heartbeat was reported.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from ..core.heartbeat import Heartbeat


class EventLog:
    """Thread-safe writer for the audit log file."""

    def __init__(self, log_path: Optional[Path]):
        """Initialize the event log.

        Args:
            log_path: Target file; None disables the log
        """
        self.log_path = log_path
        self._lock = threading.Lock()

    @staticmethod
    def build_entry(event_type: str, heartbeat: Heartbeat) -> Dict[str, Any]:
        return {
            "timestamp": datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds"),
            "event": event_type,
            "heartbeat": heartbeat.to_dict(),
        }

    def append(self, event_type: str, heartbeat: Heartbeat) -> bool:
        """Append one entry. Write errors are ignored.

        Returns:
            True if the line was written
        """
        if self.log_path is None:
            return False

        line = json.dumps(self.build_entry(event_type, heartbeat))

        with self._lock:
            try:
                with open(self.log_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError as e:
                logger.debug(f"Could not write audit log {self.log_path}: {e}")
                return False

        return True
