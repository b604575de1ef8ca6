"""Deferred flush timer for the heartbeat queue.

At most one timer is pending at any moment. The scheduler shares the queue's
lock: ``schedule`` and ``cancel`` must be called with that lock held, and the
timer thread takes it again to clear its own reference before flushing.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from loguru import logger

TimerFactory = Callable[..., threading.Timer]


class BatchScheduler:
    """One-shot timer that triggers a queue flush."""

    def __init__(
        self,
        lock: threading.RLock,
        delay_seconds: float,
        on_fire: Callable[[], None],
        timer_factory: TimerFactory = threading.Timer,
    ):
        """Initialize the scheduler.

        Args:
            lock: Lock guarding the owning queue
            delay_seconds: Delay before a scheduled flush runs
            on_fire: Flush callback, called without the lock held
            timer_factory: Callable with the ``threading.Timer`` signature
        """
        self._lock = lock
        self.delay_seconds = delay_seconds
        self._on_fire = on_fire
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

        # Statistics
        self._total_scheduled = 0
        self._total_fired = 0

    @property
    def is_active(self) -> bool:
        return self._timer is not None

    def schedule(self) -> bool:
        """Start the flush timer unless one is already pending.

        Returns:
            True if a new timer was started
        """
        if self._timer is not None:
            return False

        self._generation += 1
        timer = self._timer_factory(self.delay_seconds, self._fire, args=(self._generation,))
        timer.daemon = True
        self._timer = timer
        self._total_scheduled += 1
        timer.start()

        logger.debug(f"Scheduled batch send in {self.delay_seconds}s")
        return True

    def cancel(self) -> None:
        """Cancel the pending timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A cancelled or replaced timer must not clear the current one
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
            self._total_fired += 1

        logger.debug("Batch timer fired")
        self._on_fire()

    def get_stats(self) -> dict:
        """Get scheduler statistics."""
        return {
            "timer_active": self.is_active,
            "delay_seconds": self.delay_seconds,
            "total_scheduled": self._total_scheduled,
            "total_fired": self._total_fired,
        }
