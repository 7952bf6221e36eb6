"""Test logging setup"""

import logging

from yt2jellyfin.core.logger import (
    ColoredConsoleFormatter,
    get_logger,
    log_step,
    log_success,
    setup_logging,
    shutdown_logging,
)


def _record(level, message):
    return logging.LogRecord("test", level, __file__, 1, message, None, None)


class TestFormatter:
    """Test console formatting"""

    def test_plain_tags(self):
        formatter = ColoredConsoleFormatter(use_colors=False)
        assert formatter.format(_record(logging.INFO, "hello")) == "[INFO] hello"
        assert formatter.format(_record(logging.WARNING, "careful")) == "[WARN] careful"
        assert formatter.format(_record(25, "done")) == "[SUCCESS] done"
        assert formatter.format(_record(22, "next")) == "[STEP] next"

    def test_colored_tags(self):
        formatter = ColoredConsoleFormatter(use_colors=True)
        formatted = formatter.format(_record(logging.ERROR, "boom"))
        assert "\x1b[" in formatted
        assert formatted.endswith("[ERROR]\x1b[0m boom")


class TestSetupLogging:
    """Test handler setup"""

    def test_streams(self, capsys):
        """Errors go to stderr, everything else to stdout"""
        setup_logging(use_colors=False)
        logger = get_logger("yt2jellyfin.test")
        try:
            log_step(logger, "Checking")
            log_success(logger, "Done")
            logger.error("Broken")
            logger.debug("hidden")
        finally:
            shutdown_logging()

        captured = capsys.readouterr()
        assert "[STEP] Checking" in captured.out
        assert "[SUCCESS] Done" in captured.out
        assert "hidden" not in captured.out
        assert "[ERROR] Broken" in captured.err

    def test_log_file(self, temp_dir, capsys):
        """The log file records debug messages the console hides"""
        log_file = temp_dir / "logs" / "yt2jellyfin.log"
        setup_logging(logging.WARNING, log_file, use_colors=False)
        try:
            get_logger("yt2jellyfin.test").debug("detail")
        finally:
            shutdown_logging()

        assert "detail" in log_file.read_text(encoding="utf-8")
        assert "detail" not in capsys.readouterr().out
