"""Tests for the package logger setup."""

import logging

import pytest

from etherloop.utils.logging_config import setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("etherloop")
    level = logger.level
    yield
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()
    logger.setLevel(level)


class TestSetupLogging:
    def test_repeated_calls_do_not_duplicate_handlers(self):
        setup_logging(logging.INFO)
        logger = setup_logging(logging.DEBUG)
        assert logger.name == "etherloop"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging(logging.INFO, str(log_file))
        logging.getLogger("etherloop.core.outline").info("outline ready")
        for h in logger.handlers:
            h.flush()
        assert "outline ready" in log_file.read_text(encoding="utf-8")

    def test_reconfigure_closes_previous_file_handler(self, tmp_path):
        first = setup_logging(logging.INFO, str(tmp_path / "a.log"))
        old = [h for h in first.handlers if isinstance(h, logging.FileHandler)]
        logger = setup_logging(logging.INFO, str(tmp_path / "b.log"))
        assert old and old[0].stream is None
        assert [type(h) for h in logger.handlers] == [logging.StreamHandler, logging.FileHandler]

    def test_pil_debug_noise_is_suppressed(self):
        pil = logging.getLogger("PIL")
        before = pil.level
        try:
            setup_logging(logging.DEBUG)
            assert pil.level == logging.INFO
        finally:
            pil.setLevel(before)
