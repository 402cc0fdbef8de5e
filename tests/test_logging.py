"""Tests for changeintel.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from changeintel.errors import ConfigError
from changeintel.logging import configure_logging, get_logger, resolve_level


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("changeintel")
    touched = [get_logger(name) for name in ("snapshots", "inference")]
    saved = (list(logger.handlers), logger.level, logger.propagate)
    saved_children = [child.level for child in touched]
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    handlers, level, propagate = saved
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
    for child, child_level in zip(touched, saved_children):
        child.setLevel(child_level)


def test_get_logger_namespaces_components() -> None:
    assert get_logger().name == "changeintel"
    assert get_logger("inference").name == "changeintel.inference"


def test_resolve_level() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING
    assert resolve_level(15) == 15
    with pytest.raises(ConfigError):
        resolve_level("chatty")
    with pytest.raises(ConfigError):
        resolve_level(True)


def test_configure_logging_is_idempotent(restore_logger: logging.Logger) -> None:
    configure_logging(level="warning")
    logger = configure_logging(verbose=True, level="error")

    assert logger is restore_logger
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 1


def test_component_levels(restore_logger: logging.Logger) -> None:
    configure_logging(components={"snapshots": "ERROR", "inference": "debug"})

    assert restore_logger.level == logging.INFO
    assert not get_logger("snapshots").isEnabledFor(logging.WARNING)
    assert get_logger("inference").isEnabledFor(logging.DEBUG)
    assert get_logger("scanner").getEffectiveLevel() == logging.INFO


def test_configure_logging_writes_log_file(restore_logger: logging.Logger, tmp_path: Path) -> None:
    log_file = tmp_path / "changeintel.log"

    configure_logging(log_file=log_file)
    get_logger("scanner").info("scanned %d files", 3)
    for handler in restore_logger.handlers:
        handler.flush()

    assert len(restore_logger.handlers) == 2
    assert "changeintel.scanner: scanned 3 files" in log_file.read_text(encoding="utf-8")
