"""Centralized logging configuration for the ``ledgerlens`` package.

Library modules call ``get_logger(__name__)`` and never attach handlers of
their own. Entrypoints (the CLI) call ``configure_logging`` once.
"""
import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "ledgerlens"
_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        numeric = _level_from_name(level)
        if numeric is not None:
            return numeric
    # Env override when no usable explicit level was given
    env_val = os.getenv("LEDGERLENS_LOG_LEVEL")
    if env_val:
        numeric = _level_from_name(env_val)
        if numeric is not None:
            return numeric
    return logging.WARNING


def configure_logging(level: int | str | None = None, *, stream: IO[str] | None = None) -> None:
    """Attach a single StreamHandler to the package logger. Later calls only adjust the level."""
    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    numeric = _parse_level(level)
    if _CONFIGURED:
        logger.setLevel(numeric)
        return

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
