"""Logging helpers shared by every mediashelf module."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_LEVEL = "INFO"
LEVEL_ENV_VAR = "MEDIASHELF_LOG_LEVEL"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """
    Install a single stream handler on the package root logger.

    Args:
        level: Level name (DEBUG, INFO, ...). Falls back to MEDIASHELF_LOG_LEVEL,
            then INFO.
    """
    global _configured

    level_name = (level or os.environ.get(LEVEL_ENV_VAR) or DEFAULT_LEVEL).upper()
    root = logging.getLogger("mediashelf")
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.propagate = False
        _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a module logger, configuring the package handler on first use."""
    if not _configured:
        configure_logging()
    return logging.getLogger(name)
