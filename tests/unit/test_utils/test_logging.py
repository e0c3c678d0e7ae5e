"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from panelterm.config.settings import LoggingConfig
from panelterm.utils.logging import setup_logging


def test_setup_replaces_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "panelterm.log"
    setup_logging(LoggingConfig(level="debug", file=str(log_file)))
    setup_logging(LoggingConfig(level="debug", file=str(log_file)))

    logger = logging.getLogger("panelterm")
    try:
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logging.getLogger("panelterm.test").debug("written")
        for handler in logger.handlers:
            handler.flush()
        assert "written" in log_file.read_text()
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
