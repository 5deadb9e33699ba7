"""Tests for psyq_sigscan/core/logger.py."""
import logging

import pytest

from psyq_sigscan.core.logger import (
    CONSOLE_FORMAT,
    ColoredFormatter,
    LoggerMixin,
    console_level,
    log_execution_time,
    setup_logging,
)


def make_log_record(level=logging.WARNING, msg="Version 400: skipping"):
    return logging.LogRecord("psyq_sigscan.test", level, __file__, 1, msg, None, None)


class TestSetupLogging:

    def console_handler(self):
        return logging.getLogger().handlers[0]

    def test_default_level(self):
        setup_logging(level="warning")
        assert self.console_handler().level == logging.WARNING

    def test_verbose_shows_debug(self):
        setup_logging(level="INFO", verbose=True)
        assert self.console_handler().level == logging.DEBUG
        assert "%(threadName)s" in self.console_handler().formatter._fmt

    def test_quiet_shows_errors_only(self):
        setup_logging(level="DEBUG", quiet=True)
        assert self.console_handler().level == logging.ERROR

    def test_quiet_wins_over_verbose(self):
        assert console_level("INFO", verbose=True, quiet=True) == logging.ERROR

    def test_unknown_level_falls_back_to_info(self):
        assert console_level("chatty") == logging.INFO

    def test_file_receives_debug_records(self, tmp_path):
        log_file = tmp_path / "logs" / "scan.log"
        setup_logging(level="ERROR", log_file=log_file, quiet=True)
        logging.getLogger("psyq_sigscan.test").debug("Version 410: 3 signatures matched")
        for handler in logging.getLogger().handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "Version 410: 3 signatures matched" in text
        assert "[MainThread]" in text

    def test_setup_replaces_previous_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1


class TestColoredFormatter:

    def test_plain_when_not_a_terminal(self):
        formatter = ColoredFormatter(CONSOLE_FORMAT, use_color=False)
        assert formatter.format(make_log_record()) == "WARNING Version 400: skipping"

    def test_colors_level_name_only(self):
        formatter = ColoredFormatter(CONSOLE_FORMAT, use_color=True)
        record = make_log_record()
        text = formatter.format(record)
        assert text.startswith("\x1b[")
        assert text.endswith("Version 400: skipping")
        assert record.levelname == "WARNING"


class TestLogExecutionTime:

    def test_logs_duration_at_debug(self, caplog):
        @log_execution_time
        def scan_step():
            return 7

        with caplog.at_level(logging.DEBUG):
            assert scan_step() == 7
        assert any(r.levelno == logging.DEBUG and "scan_step took" in r.getMessage() for r in caplog.records)

    def test_failure_is_logged_and_reraised(self, caplog):
        @log_execution_time
        def failing_step():
            raise ValueError("catalog gone")

        with caplog.at_level(logging.DEBUG), pytest.raises(ValueError, match="catalog gone"):
            failing_step()
        assert any(r.levelno == logging.WARNING and "failed after" in r.getMessage() for r in caplog.records)


class TestLoggerMixin:

    def test_logger_named_after_class(self):
        class Scanner(LoggerMixin):
            pass

        assert Scanner().logger.name == f"{__name__}.Scanner"
