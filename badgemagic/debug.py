"""Debug logging helpers."""

from __future__ import annotations

import logging

_ROOT = "badgemagic"

logging.getLogger(_ROOT).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or a child of it named ``name``."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def trace(logger: logging.Logger, func_name: str) -> None:
    """Log entry into ``func_name`` at debug level."""
    logger.debug("> %s: %s()", logger.name, func_name)


def hexdump(data: bytes) -> str:
    """Render bytes as space-separated upper-case hex pairs."""
    return " ".join(f"{b:02X}" for b in data)