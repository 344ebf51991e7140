"""Centralized logging configuration for the ``cashdesk`` package.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the package
  root logger (``"cashdesk"``). Called once by the CLI at startup.
- ``get_logger(name)``: acquire a logger by name, making sure the package root
  logger has at least a ``NullHandler`` when nothing configured it.

Library modules never attach their own handlers.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "cashdesk"
_CONFIGURED = False

DEFAULT_LEVEL = logging.WARNING


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
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    env_val = os.getenv("CASHDESK_LOG_LEVEL")
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return DEFAULT_LEVEL


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Parameters
    ----------
    level:
        Logging level as ``int`` or level-name string (e.g., ``"INFO"``). If
        ``None`` or unrecognized, falls back to ``CASHDESK_LOG_LEVEL`` and then
        to ``WARNING``.
    fmt:
        Optional logging format string. Defaults to
        ``"%(asctime)s %(name)s %(levelname)s %(message)s"``.
    stream:
        Output stream for the handler (defaults to ``sys.stderr``).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Avoid double emission via the root logger.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until the application configures output."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
