"""Command line entry point: ``hackatime-lsp --wakatime-cli PATH``."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from .config import HackatimeConfig, setup_logging
from .orchestrator import HeartbeatPipeline
from .server import create_server


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hackatime-lsp", description="Report editor activity to Hackatime over LSP (stdio).")
    parser.add_argument("--wakatime-cli", default="", help="Path to wakatime-cli binary")
    parser.add_argument("--plugin", default=None, help="Plugin name reported with each heartbeat")
    parser.add_argument("--log-level", default=None, help="Log level for stderr/file logging")
    parser.add_argument("--log-file", default=None, type=Path, help="Optional rotating log file")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> HackatimeConfig:
    """Apply command line flags on top of defaults and environment overrides."""
    config = HackatimeConfig()

    if args.wakatime_cli:
        config.wakatime_cli_path = args.wakatime_cli
    if args.plugin:
        config.plugin_name = args.plugin
    if args.log_level:
        config.log_level = args.log_level.upper()
    if args.log_file:
        config.log_file = args.log_file

    return config


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = build_config(parse_args(argv))
    setup_logging(config.log_level, config.log_file)

    is_valid, errors = config.validate()
    if not is_valid:
        logger.warning(f"Invalid configuration: {errors}")

    pipeline = HeartbeatPipeline(config)
    server = create_server(pipeline)

    logger.info("Starting hackatime-lsp on stdio")
    pipeline.start()
    try:
        server.start_io()
    finally:
        pipeline.stop()
        logger.info("hackatime-lsp stopped")


if __name__ == "__main__":
    main()
