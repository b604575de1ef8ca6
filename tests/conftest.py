"""Pytest configuration and fixtures."""

from __future__ import annotations

import threading
from types import SimpleNamespace

import pytest

from hackatime_lsp.audit import EventLog
from hackatime_lsp.config import HackatimeConfig
from hackatime_lsp.core import Heartbeat
from hackatime_lsp.orchestrator import HeartbeatPipeline
from hackatime_lsp.sender import CLISender, DeliveryResponse, DeliveryStatus


class FakeTimer:
    """Stand-in for ``threading.Timer`` that only fires when told to."""

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)


class FakeTimerFactory:
    """Records every timer created by the scheduler."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


class RecordingDispatcher:
    """Collects dispatched heartbeats."""

    def __init__(self):
        self.heartbeats: list[Heartbeat] = []
        self.dispatched = threading.Event()

    def __call__(self, heartbeat: Heartbeat) -> None:
        self.heartbeats.append(heartbeat)
        self.dispatched.set()


class FakeSender(CLISender):
    """Sender that records heartbeats instead of running wakatime-cli."""

    def __init__(self, status: DeliveryStatus = DeliveryStatus.SUCCESS):
        super().__init__()
        self.status = status
        self.sent: list[Heartbeat] = []
        self.done = threading.Event()

    def send_heartbeat(self, heartbeat: Heartbeat) -> DeliveryResponse:
        self.sent.append(heartbeat)
        self.done.set()
        return self._record(DeliveryResponse(status=self.status, message="fake"))


class ClockStub:
    """Manually advanced monotonic clock, counted in whole milliseconds."""

    def __init__(self):
        self.now_ms = 0

    def __call__(self) -> float:
        return self.now_ms / 1000.0

    def advance_ms(self, ms: int) -> None:
        self.now_ms += ms


def run_inline(fn):
    fn()


def make_heartbeat(entity: str = "/a.go", **fields) -> Heartbeat:
    return Heartbeat(entity=entity, time=1700000000.123, **fields)


def ranged_change(line: int, character: int, text: str):
    start = SimpleNamespace(line=line, character=character)
    return SimpleNamespace(range=SimpleNamespace(start=start, end=start), text=text)


@pytest.fixture
def timer_factory():
    return FakeTimerFactory()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def clock():
    return ClockStub()


@pytest.fixture
def audit_log_path(tmp_path):
    return tmp_path / "hackatime-zed.log"


@pytest.fixture
def config(tmp_path, audit_log_path, monkeypatch):
    for name in (
        "HACKATIME_CLI_PATH",
        "HACKATIME_PLUGIN",
        "HACKATIME_DEBOUNCE_MS",
        "HACKATIME_BATCH_SEND_SECONDS",
        "HACKATIME_MAX_QUEUE_SIZE",
        "HACKATIME_CLI_TIMEOUT",
        "HACKATIME_AUDIT_LOG",
        "HACKATIME_LOG_FILE",
        "HACKATIME_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    return HackatimeConfig(
        wakatime_cli_path="/usr/local/bin/wakatime-cli",
        wakatime_config_path=tmp_path / ".wakatime.cfg",
        wakatime_log_path=tmp_path / ".wakatime" / "wakatime.log",
        audit_log_path=audit_log_path,
        platform="linux",
    )


@pytest.fixture
def fake_sender():
    return FakeSender()


@pytest.fixture
def pipeline(config, fake_sender, clock, timer_factory, audit_log_path):
    return HeartbeatPipeline(
        config,
        sender=fake_sender,
        event_log=EventLog(audit_log_path),
        clock=clock,
        timer_factory=timer_factory,
        spawn=run_inline,
    )
