"""Pipeline orchestrator for the Hackatime language server.

This module coordinates the heartbeat flow:
Editor notification → Audit log → Throttle → Queue → Delivery worker → wakatime-cli

One ``HeartbeatPipeline`` is created at startup and shared by every
notification handler. It owns all mutable state that the handlers touch.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Callable, Dict, Optional, Sequence

from loguru import logger

from ..audit import EventLog
from ..batcher import TimerFactory
from ..config import HackatimeConfig, WakatimeConfigReader
from ..core import CursorTracker, EventType, Heartbeat, clean_file_uri, is_virtual_uri
from ..queuer import HeartbeatQueue, QueueConfig, spawn_thread
from ..sender import CLISender, DeliveryWorker, SenderConfig
from ..throttle import EventThrottle, ThrottleConfig


def count_lines(text: Optional[str]) -> int:
    """Line count of ``text``; 1 for missing or empty text."""
    if not text:
        return 1
    return text.count("\n") + 1


class HeartbeatPipeline:
    """Turns editor notifications into throttled, queued heartbeats."""

    def __init__(
        self,
        config: Optional[HackatimeConfig] = None,
        sender: Optional[CLISender] = None,
        event_log: Optional[EventLog] = None,
        clock: Callable[[], float] = time.monotonic,
        timer_factory: TimerFactory = threading.Timer,
        spawn: Callable[[Callable[[], None]], None] = spawn_thread,
    ):
        """Initialize the pipeline and all of its components.

        Args:
            config: Server configuration
            sender: Delivery client (built from config when omitted)
            event_log: Audit log (built from config when omitted)
            clock: Monotonic clock used by the throttle
            timer_factory: Timer constructor used for deferred flushes
            spawn: Runs eager flushes asynchronously
        """
        self.config = config or HackatimeConfig()
        self.project_root = ""
        self.project_folder = ""
        self._running = False

        self.cursor_tracker = CursorTracker()
        self.throttle = EventThrottle(ThrottleConfig(debounce_ms=self.config.debounce_ms), clock=clock)

        self.sender = sender or CLISender(
            SenderConfig(
                cli_path=self.config.wakatime_cli_path,
                timeout_seconds=self.config.cli_timeout_seconds,
                windows=self.config.is_windows,
                wakatime_config_path=self.config.wakatime_config_path,
                wakatime_log_path=self.config.wakatime_log_path,
                config_reader=WakatimeConfigReader(self.config.wakatime_config_path),
            )
        )
        self.worker = DeliveryWorker(self.sender)

        self.queue = HeartbeatQueue(
            dispatch=self.worker.submit,
            config=QueueConfig(max_size=self.config.max_queue_size, batch_send_seconds=self.config.batch_send_seconds),
            timer_factory=timer_factory,
            spawn=spawn,
        )

        self.event_log = event_log if event_log is not None else EventLog(self.config.audit_log_path)

        logger.debug("Initialized heartbeat pipeline")

    def start(self) -> None:
        """Start background delivery."""
        if self._running:
            return
        self._running = True
        self.worker.start()

    def stop(self) -> None:
        """Stop the pipeline. Queued and undelivered heartbeats are discarded."""
        if not self._running:
            return
        self._running = False
        self.queue.stop()
        self.worker.stop()

    def initialize(self, root_uri: Optional[str] = None, root_path: Optional[str] = None) -> None:
        """Capture the workspace root reported by the editor.

        Args:
            root_uri: Workspace root URI, preferred when present
            root_path: Deprecated workspace root path
        """
        if root_uri:
            root = clean_file_uri(root_uri)
        elif root_path:
            root = os.path.normpath(root_path)
        else:
            logger.info("Editor reported no workspace root")
            return

        self.project_root = root
        self.project_folder = root
        self.queue.set_project(root, root)
        logger.info(f"Workspace root: {root}")

    def handle_change(self, uri: str, content_changes: Sequence[Any]) -> Heartbeat:
        """Build and submit a heartbeat for a ``didChange`` notification.

        Only the first content change is inspected. A ranged change supplies
        the line and column; any non-empty text supplies the line count.

        Returns:
            The heartbeat built for the notification
        """
        entity = clean_file_uri(uri)
        lineno = 1
        cursorpos = 0
        lines = 1

        if content_changes:
            change = content_changes[0]
            change_range = getattr(change, "range", None)
            if change_range is not None:
                lineno = change_range.start.line + 1
                cursorpos = change_range.start.character
            text = getattr(change, "text", "")
            if text:
                lines = count_lines(text)

        self.cursor_tracker.save(entity, lineno, cursorpos)

        heartbeat = self._build(uri, entity, lineno=lineno, cursorpos=cursorpos, lines_in_file=lines)
        self._submit(EventType.DID_CHANGE, heartbeat)
        return heartbeat

    def handle_save(self, uri: str, text: Optional[str] = None) -> Heartbeat:
        """Build and submit a write heartbeat for a ``didSave`` notification.

        Returns:
            The heartbeat built for the notification
        """
        entity = clean_file_uri(uri)

        heartbeat = self._build(
            uri,
            entity,
            lineno=1,
            cursorpos=self.cursor_tracker.get(entity),
            lines_in_file=count_lines(text),
            is_write=True,
        )
        self._submit(EventType.DID_SAVE, heartbeat)
        return heartbeat

    def _build(self, uri: str, entity: str, **fields: Any) -> Heartbeat:
        return Heartbeat(
            entity=entity,
            category=self.config.category,
            plugin=self.config.plugin_name,
            is_unsaved_entity=is_virtual_uri(uri),
            **fields,
        )

    def _submit(self, event_type: EventType, heartbeat: Heartbeat) -> bool:
        self.event_log.append(event_type.value, heartbeat)

        if not self.throttle.admit(heartbeat.entity, heartbeat.is_write):
            return False

        self.queue.enqueue(heartbeat)
        return True

    def get_stats(self) -> Dict[str, Any]:
        """Get pipeline statistics."""
        return {
            "pipeline": {
                "running": self._running,
                "project_root": self.project_root,
                "tracked_documents": len(self.cursor_tracker),
            },
            "throttle": self.throttle.get_stats(),
            "queue": self.queue.get_stats(),
            "worker": self.worker.get_stats(),
            "sender": self.sender.get_stats(),
        }
