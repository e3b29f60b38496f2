"""Logging setup for custom-agent-provider.

Modules log through ``logging.getLogger(__name__)``; this module only wires a
handler onto the package logger for applications and the CLI.

Usage:
    from custom_agent.logging import configure_logging, get_logger

    configure_logging("DEBUG")
    log = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

ROOT_LOGGER = "custom_agent"
LOG_LEVEL_ENV = "CUSTOM_AGENT_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def _resolve_level(level: Union[str, int, None]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV) or "WARNING"
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.WARNING


def configure_logging(
    level: Union[str, int, None] = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Attach a stream handler to the ``custom_agent`` logger.

    Calling this more than once replaces the previous handler instead of
    stacking a new one.

    Args:
        level: Level name or number. Defaults to ``CUSTOM_AGENT_LOG_LEVEL``,
            then ``WARNING``.
        fmt: Log record format.

    Returns:
        The configured package logger.
    """
    global _handler

    logger = logging.getLogger(ROOT_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(_handler)
    logger.setLevel(_resolve_level(level))
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger, nesting it under the package logger if needed."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "LOG_LEVEL_ENV"]
