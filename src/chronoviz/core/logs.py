"""
Loguru setup for the chronoviz namespace.

The package disables its own log records at import (library convention for loguru);
applications opt in with configure_logging().
"""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger

__all__ = ["configure_logging", "LOG_FORMAT"]

LOG_FORMAT = "{time:HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

_handler_id: int | None = None


def _stderr_sink(message: str) -> None:
    # Resolve sys.stderr per record so redirected streams (pytest, notebooks) are honoured.
    sys.stderr.write(message)


def configure_logging(level: str = "INFO", sink: Any = None) -> int:
    """
    Enable chronoviz log records and install a single sink.

    Calling again replaces the sink installed by the previous call, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        level (str): Minimum level name (e.g., "DEBUG", "WARNING").
        sink (Any): Loguru sink (file path, stream, callable). Defaults to stderr.

    Returns:
        int: Loguru handler id of the installed sink.
    """
    global _handler_id
    # First call also drops loguru's default stderr handler (id 0) to avoid duplicate lines.
    try:
        logger.remove(_handler_id if _handler_id is not None else 0)
    except ValueError:
        pass
    _handler_id = logger.add(
        sink if sink is not None else _stderr_sink,
        level=level.upper(),
        format=LOG_FORMAT,
        filter="chronoviz",
    )
    logger.enable("chronoviz")
    return _handler_id
