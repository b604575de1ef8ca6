"""Per-document debounce for editor notifications.

Editors emit a change notification on every keystroke. The throttle drops
change events that arrive within the debounce window of the last admitted
event for the same document. Save events always pass.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from loguru import logger


@dataclass
class ThrottleConfig:
    """Configuration for the event throttle."""

    debounce_ms: int = 50  # Minimum gap between admitted change events


class EventThrottle:
    """Thread-safe admit/drop decision per document."""

    def __init__(
        self,
        config: ThrottleConfig = ThrottleConfig(),
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the throttle.

        Args:
            config: Throttle configuration
            clock: Monotonic clock returning seconds
        """
        self.config = config
        self._clock = clock
        self._last_event: Dict[str, float] = {}
        self._lock = threading.Lock()

        # Statistics
        self._total_admitted = 0
        self._total_dropped = 0

    def admit(self, document_id: str, is_write: bool) -> bool:
        """Decide whether an event for ``document_id`` becomes a heartbeat.

        Args:
            document_id: Normalized path of the document
            is_write: True for save events

        Returns:
            True if admitted, False if dropped
        """
        window = self.config.debounce_ms / 1000.0

        with self._lock:
            now = self._clock()
            last = self._last_event.get(document_id)

            if is_write or last is None or now - last >= window:
                self._last_event[document_id] = now
                self._total_admitted += 1
                return True

            self._total_dropped += 1

        logger.debug(f"Debounced change event for {document_id}")
        return False

    def get_stats(self) -> dict:
        """Get throttle statistics."""
        with self._lock:
            return {
                "tracked_documents": len(self._last_event),
                "total_admitted": self._total_admitted,
                "total_dropped": self._total_dropped,
                "debounce_ms": self.config.debounce_ms,
            }
