"""Logging utilities for the stateless server."""

import logging

from rich.console import Console
from rich.logging import RichHandler

from mcp_stateless_server.settings import LogLevel


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(name)


def configure_logging(level: LogLevel = "INFO") -> None:
    """Configure logging for the server.

    Records go to stderr so that the stdio transport keeps stdout to itself.

    Args:
        level: the log level to use
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )
