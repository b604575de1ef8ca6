"""In-memory heartbeat queue for the Hackatime language server.

This module provides the FIFO buffer between the event throttle and the
delivery worker. Records leave the queue one at a time: either when the
deferred batch timer fires, or eagerly when the queue reaches its size cap.
"""

from __future__ import annotations

import os
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from ..batcher import BatchScheduler, TimerFactory
from ..core.heartbeat import Heartbeat


@dataclass
class QueueConfig:
    """Configuration for the heartbeat queue."""

    max_size: int = 100  # Eager flush threshold
    batch_send_seconds: float = 120.0  # Deferred flush delay


def spawn_thread(fn: Callable[[], None]) -> None:
    threading.Thread(target=fn, name="hackatime-flush", daemon=True).start()


class HeartbeatQueue:
    """Thread-safe FIFO of pending heartbeats with a deferred flush timer."""

    def __init__(
        self,
        dispatch: Callable[[Heartbeat], None],
        config: QueueConfig = QueueConfig(),
        timer_factory: TimerFactory = threading.Timer,
        spawn: Callable[[Callable[[], None]], None] = spawn_thread,
    ):
        """Initialize the heartbeat queue.

        Args:
            dispatch: Non-blocking hand-off of one heartbeat for delivery
            config: Queue configuration
            timer_factory: Timer constructor used by the batch scheduler
            spawn: Runs an eager flush asynchronously
        """
        self.config = config
        self._dispatch = dispatch
        self._spawn = spawn
        self._queue: deque[Heartbeat] = deque()
        self._lock = threading.RLock()
        self._scheduler = BatchScheduler(
            lock=self._lock,
            delay_seconds=config.batch_send_seconds,
            on_fire=self.flush_heartbeats,
            timer_factory=timer_factory,
        )

        self._project_root = ""
        self._project_folder = ""
        self.last_sent: Optional[float] = None

        # Statistics
        self._total_enqueued = 0
        self._total_flushed = 0
        self._total_eager_flushes = 0

    def set_project(self, project_root: str, project_folder: str) -> None:
        """Record the workspace root used to fill in project fields."""
        with self._lock:
            self._project_root = project_root
            self._project_folder = project_folder

    def enqueue(self, heartbeat: Heartbeat) -> None:
        """Append a heartbeat and decide how the queue gets flushed.

        Args:
            heartbeat: Admitted heartbeat; the caller's instance is not modified
        """
        eager = False

        with self._lock:
            updates = {}
            if not heartbeat.alternate_project and self._project_root:
                updates["alternate_project"] = os.path.basename(self._project_root)
            if not heartbeat.project_folder and self._project_folder:
                updates["project_folder"] = self._project_folder
            if updates:
                heartbeat = heartbeat.model_copy(update=updates)

            self._queue.append(heartbeat)
            self._total_enqueued += 1
            size = len(self._queue)

            if size >= self.config.max_size:
                eager = True
                self._total_eager_flushes += 1
            elif size == 1:
                self.schedule_batch_send()

        logger.debug(f"Enqueued heartbeat for {heartbeat.entity}, queue size: {size}")

        if eager:
            logger.debug(f"Queue reached {size} heartbeats, flushing immediately")
            self._spawn(self.flush_heartbeats)

    def schedule_batch_send(self) -> bool:
        """Start the deferred flush timer unless one is pending.

        Returns:
            True if a new timer was started
        """
        with self._lock:
            return self._scheduler.schedule()

    def flush_heartbeats(self) -> Optional[Heartbeat]:
        """Pop the head of the queue and hand it to the dispatcher.

        Exactly one heartbeat leaves per call. Delivery is not awaited and
        its outcome is not reported back to the queue.

        Returns:
            The dispatched heartbeat, or None if the queue was empty
        """
        with self._lock:
            if not self._queue:
                return None

            heartbeat = self._queue.popleft()
            self.last_sent = time.time()
            self._total_flushed += 1

            try:
                self._dispatch(heartbeat)
            except Exception as e:
                logger.error(f"Failed to dispatch heartbeat for {heartbeat.entity}: {e}")

            if self._queue:
                self._scheduler.schedule()

            return heartbeat

    def size(self) -> int:
        """Return the current queue size."""
        with self._lock:
            return len(self._queue)

    def is_empty(self) -> bool:
        with self._lock:
            return len(self._queue) == 0

    @property
    def timer_active(self) -> bool:
        with self._lock:
            return self._scheduler.is_active

    def stop(self) -> list[Heartbeat]:
        """Cancel the pending timer and discard queued heartbeats.

        Returns:
            The heartbeats that were never flushed
        """
        with self._lock:
            self._scheduler.cancel()
            remaining = list(self._queue)
            self._queue.clear()

        if remaining:
            logger.info(f"Discarded {len(remaining)} unsent heartbeats")
        return remaining

    def get_stats(self) -> dict:
        """Get queue statistics."""
        with self._lock:
            return {
                "current_size": len(self._queue),
                "max_size": self.config.max_size,
                "total_enqueued": self._total_enqueued,
                "total_flushed": self._total_flushed,
                "total_eager_flushes": self._total_eager_flushes,
                "last_sent": self.last_sent,
                "scheduler": self._scheduler.get_stats(),
            }
