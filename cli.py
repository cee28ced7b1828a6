"""Command-line entry point for the termbridge MCP server."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from config import ConfigManager, ServerConfig

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LEVELS = ("debug", "info", "warning", "error", "critical")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="termbridge",
        description="Serve terminal, process and filesystem tools over MCP (stdio)",
    )
    parser.add_argument("--config", type=Path, help="Path to JSON config file (default ~/.termbridge/config.json)")
    parser.add_argument(
        "--log-level",
        choices=_LEVELS,
        type=str.lower,
        help="Override the log level from the config file",
    )
    return parser.parse_args(argv)


def configure_logging(config: ServerConfig, level_override: Optional[str] = None) -> None:
    """Send all log records to stderr; stdout carries protocol frames only."""
    if not config.enable_logging:
        level = logging.CRITICAL
    else:
        name = (level_override or config.log_level or "info").upper()
        level = getattr(logging, name, logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    manager = ConfigManager(args.config)
    configure_logging(manager.config, args.log_level)

    from server import TerminalServer

    server = TerminalServer(config_manager=manager)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        print("Shutting down", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
