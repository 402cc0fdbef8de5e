"""Logger hierarchy for changeintel components.

Every component logs under ``changeintel.<component>`` (``scanner``,
``snapshots``, ``classifiers.frontend``, ``inference`` ...), so callers can
tune one transform without touching the others.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Union

from .errors import ConfigError

_LOGGER_NAME = "changeintel"
_CONSOLE_FORMAT = "[changeintel] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

Level = Union[str, int]


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger for one component, or the package logger."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(level: Level) -> int:
    """Turn ``"debug"`` / ``"WARNING"`` / ``10`` into a logging level number."""
    if isinstance(level, bool):
        raise ConfigError(f"Invalid log level: {level!r}")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ConfigError(f"Unknown log level '{level}'")
    return resolved


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Optional[Path] = None,
    level: Optional[Level] = None,
    components: Optional[Mapping[str, Level]] = None,
) -> logging.Logger:
    """Install console (and optional file) handlers on the package logger.

    ``verbose`` wins over ``level``. ``components`` maps component names to
    their own thresholds, e.g. ``{"snapshots": "ERROR"}`` to silence
    per-file extraction warnings on large batches.
    """
    threshold = logging.DEBUG if verbose else resolve_level(level or logging.INFO)
    logger = get_logger()
    logger.setLevel(threshold)
    logger.propagate = False

    # Repeated calls (service restarts, tests) must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    for component, component_level in (components or {}).items():
        get_logger(component).setLevel(resolve_level(component_level))

    return logger


__all__ = ["configure_logging", "get_logger", "resolve_level"]
