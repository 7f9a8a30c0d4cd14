"""Logging helpers shared across the overlay core."""
from __future__ import annotations

import importlib.util
import logging
from pathlib import Path
from typing import Callable

from ..core.config import LOG_DIR


def _null_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def _load_logger_from_path(path: Path) -> Callable[..., logging.Logger] | None:
    if not path.is_file():
        return None
    spec = importlib.util.spec_from_file_location("moria_overlay_dev_logging", str(path))
    if spec is None or spec.loader is None:
        return None
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception:
        return None
    get_logger = getattr(module, "get_overlay_logger", None)
    if callable(get_logger):
        return get_logger
    return None


def _load_dev_logger() -> Callable[..., logging.Logger] | None:
    return _load_logger_from_path(LOG_DIR / "dev_overlay_logging.py")


def get_overlay_logger(name: str = "moria_overlay", filename: str = "overlay.log") -> logging.Logger:
    """
    Return a configured logger for the overlay core.

    File logging is only enabled when a ``dev_overlay_logging.py`` module
    exposing ``get_overlay_logger(name=..., filename=...)`` sits in the log
    directory. Otherwise a no-op logger is returned so the host never sees
    output it did not ask for.
    """
    dev_logger = _load_dev_logger()
    if dev_logger is not None:
        try:
            return dev_logger(name=name, filename=filename)
        except Exception:
            return _null_logger(name)
    return _null_logger(name)


LOG_DEBUG = logging.DEBUG
LOG_WARNING = logging.WARNING
MEMORY_LOGGER = get_overlay_logger("moria_overlay.memory", "memory.log")


__all__ = ["get_overlay_logger", "LOG_DEBUG", "LOG_WARNING", "MEMORY_LOGGER"]
