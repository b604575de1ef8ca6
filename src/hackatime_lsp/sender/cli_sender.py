"""wakatime-cli sender for delivering heartbeats to the tracking backend.

Each heartbeat is reported by one invocation of the external CLI. This module
builds the argument vector, runs the process under a timeout and maps the
outcome to a ``DeliveryResponse``.
"""

from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel

from ..config.wakatime_cfg import WakatimeConfigReader
from ..core.heartbeat import Heartbeat


class DeliveryStatus(Enum):
    """Enum representing heartbeat delivery outcomes."""

    SUCCESS = "success"
    CONFIG_ERROR = "config_error"  # No wakatime-cli path configured
    SPAWN_ERROR = "spawn_error"  # Executable missing or not runnable
    PROCESS_ERROR = "process_error"  # Non-zero exit status
    TIMEOUT = "timeout"


class DeliveryResponse(BaseModel):
    """Response model for one delivery attempt."""

    status: DeliveryStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == DeliveryStatus.SUCCESS


@dataclass
class SenderConfig:
    """Configuration for the CLI sender."""

    cli_path: str = ""
    timeout_seconds: float = 10.0
    windows: bool = False
    wakatime_config_path: Optional[Path] = None  # Passed with --config on Windows
    wakatime_log_path: Optional[Path] = None  # Passed with --log-file on Windows
    config_reader: WakatimeConfigReader = field(default_factory=WakatimeConfigReader)


def needs_quoting(arg: str) -> bool:
    return any(ch in arg for ch in (" ", "\t", '"', "\\"))


def quote_arg(arg: str) -> str:
    """Wrap ``arg`` in double quotes if it holds whitespace, quotes or backslashes."""
    if needs_quoting(arg):
        return '"' + arg.replace('"', '\\"') + '"'
    return arg


def build_heartbeat_args(
    heartbeat: Heartbeat,
    api_key: str = "",
    api_url: str = "",
    config_file: Optional[Path] = None,
    log_file: Optional[Path] = None,
) -> List[str]:
    """Build the wakatime-cli argument vector for a heartbeat.

    Args:
        heartbeat: Heartbeat to report
        api_key: Value for ``--key``, omitted when empty
        api_url: Value for ``--api-url``, omitted when empty
        config_file: Value for ``--config`` (Windows only)
        log_file: Value for ``--log-file`` (Windows only)

    Returns:
        Argument list without the executable
    """
    args = [
        "--entity", quote_arg(heartbeat.entity),
        "--time", f"{heartbeat.time:.3f}",
        "--plugin", quote_arg(heartbeat.plugin),
        "--lineno", str(heartbeat.lineno),
        "--cursorpos", str(heartbeat.cursorpos),
        "--lines-in-file", str(heartbeat.lines_in_file),
    ]

    if heartbeat.category:
        args += ["--category", heartbeat.category]

    if heartbeat.ai_line_changes > 0:
        args += ["--ai-line-changes", str(heartbeat.ai_line_changes)]
    if heartbeat.human_line_changes > 0:
        args += ["--human-line-changes", str(heartbeat.human_line_changes)]

    if api_key:
        args += ["--key", quote_arg(api_key)]
    if api_url:
        args += ["--api-url", quote_arg(api_url)]

    if heartbeat.alternate_project:
        args += ["--alternate-project", quote_arg(heartbeat.alternate_project)]
    if heartbeat.project_folder:
        args += ["--project-folder", quote_arg(heartbeat.project_folder)]

    if heartbeat.is_write:
        args.append("--write")

    if config_file:
        args += ["--config", quote_arg(str(config_file))]
    if log_file:
        args += ["--log-file", quote_arg(str(log_file))]

    if heartbeat.is_unsaved_entity:
        args.append("--is-unsaved-entity")

    if heartbeat.local_file:
        args += ["--local-file", quote_arg(heartbeat.local_file)]

    return args


class CLISender:
    """Runs wakatime-cli once per heartbeat."""

    def __init__(self, config: SenderConfig = SenderConfig()):
        """Initialize the CLI sender.

        Args:
            config: Sender configuration
        """
        self.config = config

        # Statistics
        self._total_sent = 0
        self._total_failed = 0
        self._total_send_time = 0.0
        self._last_error: Optional[str] = None

    def build_args(self, heartbeat: Heartbeat) -> List[str]:
        """Build arguments with credentials from the WakaTime config file."""
        reader = self.config.config_reader
        config_file = log_file = None
        if self.config.windows:
            config_file = self.config.wakatime_config_path
            log_file = self.config.wakatime_log_path

        return build_heartbeat_args(
            heartbeat,
            api_key=reader.api_key,
            api_url=reader.api_url,
            config_file=config_file,
            log_file=log_file,
        )

    def send_heartbeat(self, heartbeat: Heartbeat) -> DeliveryResponse:
        """Report one heartbeat through wakatime-cli.

        Args:
            heartbeat: Heartbeat to deliver

        Returns:
            Delivery outcome; never raises
        """
        if not self.config.cli_path:
            return self._record(DeliveryResponse(status=DeliveryStatus.CONFIG_ERROR, message="wakatime-cli path not provided"))

        command = [self.config.cli_path, *self.build_args(heartbeat)]
        start_time = time.time()
        logger.debug(f"Running wakatime-cli for {heartbeat.entity}")

        try:
            result = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.config.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            response = DeliveryResponse(status=DeliveryStatus.TIMEOUT, message=f"wakatime-cli timed out after {self.config.timeout_seconds}s")
        except OSError as e:
            response = DeliveryResponse(status=DeliveryStatus.SPAWN_ERROR, message=f"Could not run wakatime-cli: {e}")
        else:
            if result.returncode == 0:
                response = DeliveryResponse(status=DeliveryStatus.SUCCESS)
            else:
                stderr = (result.stderr or "").strip()
                response = DeliveryResponse(status=DeliveryStatus.PROCESS_ERROR, message=f"wakatime-cli exited with status {result.returncode}: {stderr}")

        self._total_send_time += time.time() - start_time
        return self._record(response)

    def _record(self, response: DeliveryResponse) -> DeliveryResponse:
        if response.ok:
            self._total_sent += 1
            self._last_error = None
        else:
            self._total_failed += 1
            self._last_error = response.message
        return response

    def get_stats(self) -> Dict[str, Any]:
        """Get sender statistics."""
        attempts = self._total_sent + self._total_failed
        return {
            "total_sent": self._total_sent,
            "total_failed": self._total_failed,
            "success_rate": self._total_sent / max(1, attempts),
            "average_send_time_seconds": self._total_send_time / max(1, attempts),
            "last_error": self._last_error,
            "cli_configured": bool(self.config.cli_path),
        }
