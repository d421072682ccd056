"""Unit tests for logging configuration."""

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from audioimport.logging_setup import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("audioimport")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in saved[0]:
        logger.addHandler(handler)
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


class TestSetupLogging:
    def test_rich_handler_installed(self, package_logger: logging.Logger) -> None:
        setup_logging("debug")

        assert package_logger.level == logging.DEBUG
        assert [type(h) for h in package_logger.handlers] == [RichHandler]

    def test_repeated_setup_replaces_handlers(self, package_logger: logging.Logger) -> None:
        setup_logging("INFO")
        setup_logging("WARNING")

        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.WARNING

    def test_log_file(self, package_logger: logging.Logger, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "audioimport.log"

        setup_logging(logging.INFO, log_file)
        logging.getLogger("audioimport.pipeline").info("run finished")
        for handler in package_logger.handlers:
            handler.flush()

        assert "audioimport.pipeline - INFO - run finished" in log_file.read_text()

    def test_unknown_level(self, package_logger: logging.Logger) -> None:
        with pytest.raises(ValueError, match="Unknown log level: LOUD"):
            setup_logging("LOUD")
