"""Shared logging configuration for the Fizzy MCP server."""

import logging
import os
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_level() -> int:
    """Get log level from LOG_LEVEL environment variable.

    Defaults to WARNING if not set.
    """
    level_name = os.getenv("LOG_LEVEL", "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def configure_logging(verbose: bool = False) -> None:
    """
    Configure logging for the server.

    Logs go to stderr; stdout carries the MCP stdio protocol.

    Args:
        verbose: If True, override LOG_LEVEL to DEBUG
    """
    level = logging.DEBUG if verbose else get_log_level()

    logging.basicConfig(
        level=level,
        format=DEFAULT_FORMAT,
        stream=sys.stderr,
        force=True,  # Allow reconfiguration
    )

    # Suppress noisy third-party loggers
    for name in ("httpx", "httpcore", "mcp"):
        logging.getLogger(name).setLevel(logging.WARNING)
