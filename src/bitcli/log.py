"""Logging setup for the bitcli command line."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


LOG_ENV = "BITCLI_LOG"

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


def resolve_level(verbosity: int = 0, env_level: str | None = None) -> int:
    """Map -v flags (or a BITCLI_LOG level name, which wins) to a log level."""
    if env_level:
        level = logging.getLevelName(env_level.strip().upper())
        if isinstance(level, int):
            return level
    return _LEVELS[min(max(verbosity, 0), len(_LEVELS) - 1)]


def configure_logging(verbosity: int = 0) -> None:
    """Send bitcli logs to stderr through rich.

    Idempotent: calling it again only updates the level.
    """
    level = resolve_level(verbosity, os.environ.get(LOG_ENV))
    logger = logging.getLogger("bitcli")
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
