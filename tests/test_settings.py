"""Tests for configuration defaults, environment overrides and validation."""

from pathlib import Path

import pytest

from hackatime_lsp.__main__ import build_config, parse_args
from hackatime_lsp.config import HackatimeConfig

ENV_VARS = (
    "HACKATIME_CLI_PATH",
    "HACKATIME_PLUGIN",
    "HACKATIME_DEBOUNCE_MS",
    "HACKATIME_BATCH_SEND_SECONDS",
    "HACKATIME_MAX_QUEUE_SIZE",
    "HACKATIME_CLI_TIMEOUT",
    "HACKATIME_AUDIT_LOG",
    "HACKATIME_LOG_FILE",
    "HACKATIME_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = HackatimeConfig()

    assert config.wakatime_cli_path == ""
    assert config.cli_timeout_seconds == 10.0
    assert config.plugin_name == "Zed"
    assert config.debounce_ms == 50
    assert config.batch_send_seconds == 120.0
    assert config.max_queue_size == 100
    assert config.audit_log_path.name == "hackatime-zed.log"
    assert config.wakatime_config_path.name == ".wakatime.cfg"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("HACKATIME_CLI_PATH", "/opt/wakatime-cli")
    monkeypatch.setenv("HACKATIME_PLUGIN", "Helix")
    monkeypatch.setenv("HACKATIME_DEBOUNCE_MS", "25")
    monkeypatch.setenv("HACKATIME_BATCH_SEND_SECONDS", "5")
    monkeypatch.setenv("HACKATIME_MAX_QUEUE_SIZE", "10")
    monkeypatch.setenv("HACKATIME_CLI_TIMEOUT", "3.5")
    monkeypatch.setenv("HACKATIME_AUDIT_LOG", str(tmp_path / "audit.log"))
    monkeypatch.setenv("HACKATIME_LOG_LEVEL", "debug")

    config = HackatimeConfig()

    assert config.wakatime_cli_path == "/opt/wakatime-cli"
    assert config.plugin_name == "Helix"
    assert config.debounce_ms == 25
    assert config.batch_send_seconds == 5.0
    assert config.max_queue_size == 10
    assert config.cli_timeout_seconds == 3.5
    assert config.audit_log_path == tmp_path / "audit.log"
    assert config.log_level == "DEBUG"


def test_invalid_numeric_env_keeps_default(monkeypatch):
    monkeypatch.setenv("HACKATIME_DEBOUNCE_MS", "fast")
    monkeypatch.setenv("HACKATIME_MAX_QUEUE_SIZE", "lots")

    config = HackatimeConfig()

    assert config.debounce_ms == 50
    assert config.max_queue_size == 100


def test_validate_requires_cli_path():
    is_valid, errors = HackatimeConfig().validate()

    assert not is_valid
    assert "wakatime-cli path is required" in errors


def test_validate_rejects_bad_numbers():
    config = HackatimeConfig(
        wakatime_cli_path="/opt/wakatime-cli",
        batch_send_seconds=0,
        max_queue_size=0,
        cli_timeout_seconds=-1,
    )

    is_valid, errors = config.validate()

    assert not is_valid
    assert len(errors) == 3


def test_validate_accepts_valid_config():
    assert HackatimeConfig(wakatime_cli_path="/opt/wakatime-cli").validate() == (True, [])


def test_is_windows():
    assert HackatimeConfig(platform="windows").is_windows
    assert not HackatimeConfig(platform="darwin").is_windows


def test_command_line_flags_override_environment(monkeypatch):
    monkeypatch.setenv("HACKATIME_CLI_PATH", "/env/wakatime-cli")

    config = build_config(
        parse_args(["--wakatime-cli", "/flag/wakatime-cli", "--plugin", "Zed Preview", "--log-level", "warning", "--log-file", "/tmp/lsp.log"])
    )

    assert config.wakatime_cli_path == "/flag/wakatime-cli"
    assert config.plugin_name == "Zed Preview"
    assert config.log_level == "WARNING"
    assert config.log_file == Path("/tmp/lsp.log")


def test_missing_flag_keeps_environment(monkeypatch):
    monkeypatch.setenv("HACKATIME_CLI_PATH", "/env/wakatime-cli")

    config = build_config(parse_args([]))

    assert config.wakatime_cli_path == "/env/wakatime-cli"
