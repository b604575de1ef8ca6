"""Background delivery of flushed heartbeats.

The queue hands each flushed heartbeat to this worker and returns at once.
A single thread drains the channel and runs the sender, so subprocess time
never blocks the queue lock and heartbeats are reported in dispatch order.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Dict, Optional

from loguru import logger

from ..core.heartbeat import Heartbeat
from .cli_sender import CLISender, DeliveryResponse

FailureCallback = Callable[[Heartbeat, DeliveryResponse], None]

_STOP = object()


class DeliveryWorker:
    """Best-effort delivery thread. Failed heartbeats are not retried."""

    def __init__(self, sender: CLISender, on_failure: Optional[FailureCallback] = None):
        """Initialize the delivery worker.

        Args:
            sender: Sender that reports one heartbeat per call
            on_failure: Optional hook receiving heartbeats that failed delivery
        """
        self.sender = sender
        self.on_failure = on_failure
        self._channel: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._running = False
        self._thread: Optional[threading.Thread] = None

        # Statistics
        self._total_submitted = 0
        self._total_delivered = 0
        self._total_failed = 0
        self._total_rejected = 0

    def start(self) -> None:
        """Start the worker thread."""
        with self._lock:
            if self._running:
                logger.warning("Delivery worker is already running")
                return

            self._running = True
            self._thread = threading.Thread(target=self._run, name="hackatime-delivery", daemon=True)
            self._thread.start()
            logger.info("Started delivery worker")

    def stop(self, timeout: float = 1.0) -> int:
        """Stop the worker, discarding heartbeats that were not yet delivered.

        Returns:
            Number of discarded heartbeats
        """
        with self._lock:
            if not self._running:
                return 0
            self._running = False

        discarded = 0
        while True:
            try:
                item = self._channel.get_nowait()
            except queue.Empty:
                break
            if item is not _STOP:
                discarded += 1

        self._channel.put(_STOP)
        if self._thread:
            self._thread.join(timeout=timeout)

        logger.info(f"Stopped delivery worker. Stats - Delivered: {self._total_delivered}, Failed: {self._total_failed}, Discarded: {discarded}")
        return discarded

    def submit(self, heartbeat: Heartbeat) -> bool:
        """Queue a heartbeat for delivery without waiting.

        Returns:
            False if the worker is not running and the heartbeat was dropped
        """
        with self._lock:
            if not self._running:
                self._total_rejected += 1
                logger.debug(f"Delivery worker not running, dropped heartbeat for {heartbeat.entity}")
                return False
            self._total_submitted += 1
            self._channel.put(heartbeat)
        return True

    def pending(self) -> int:
        return self._channel.qsize()

    def _run(self) -> None:
        logger.debug("Delivery worker loop started")

        while True:
            item = self._channel.get()
            if item is _STOP:
                break
            self._deliver(item)

        logger.debug("Delivery worker loop finished")

    def _deliver(self, heartbeat: Heartbeat) -> None:
        try:
            response = self.sender.send_heartbeat(heartbeat)
        except Exception as e:
            logger.error(f"Unexpected error delivering heartbeat for {heartbeat.entity}: {e}")
            self._total_failed += 1
            return

        if response.ok:
            self._total_delivered += 1
            logger.debug(f"Delivered heartbeat for {heartbeat.entity}")
            return

        self._total_failed += 1
        logger.warning(f"Dropped heartbeat for {heartbeat.entity}: {response.status.value} {response.message}")

        if self.on_failure:
            try:
                self.on_failure(heartbeat, response)
            except Exception:
                logger.exception("Delivery failure callback raised")

    def get_stats(self) -> Dict[str, Any]:
        """Get delivery worker statistics."""
        return {
            "running": self._running,
            "pending": self.pending(),
            "total_submitted": self._total_submitted,
            "total_delivered": self._total_delivered,
            "total_failed": self._total_failed,
            "total_rejected": self._total_rejected,
        }
