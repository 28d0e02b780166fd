"""
Logging helpers shared by the client, the CLI and the examples.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(level: int | str) -> int:
    """Turn ``"DEBUG"``/``"info"``/``20`` into a logging level number."""
    if isinstance(level, int):
        return level
    if level.isdigit():
        return int(level)
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        msg = f"Unknown log level: {level}"
        raise ValueError(msg)
    return resolved


def setup_logger(logger: logging.Logger, log_level: int | str) -> None:
    """
    Attach a single StreamHandler to ``logger`` unless it already has one.

    Args:
        logger: The logger instance to configure
        log_level: Level number or level name
    """
    level = resolve_level(log_level)
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
