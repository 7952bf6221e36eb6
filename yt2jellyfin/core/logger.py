"""
Logging configuration for yt2jellyfin.

This module sets up the logging system with up to two outputs:
    - Console: Coloured, tagged lines ([INFO], [SUCCESS], [WARN], [ERROR],
      [STEP]). ERROR and above go to stderr, everything else to stdout.
    - Log file (optional): Complete log of all events (DEBUG and above)
      with timestamps, appended across runs.

Two extra levels sit between DEBUG/INFO/WARNING:
    STEP (22): A major phase is starting ("Checking dependencies...")
    SUCCESS (25): A phase finished well ("Download complete!")

Usage:
    from yt2jellyfin.core.logger import setup_logging, get_logger, log_success

    setup_logging()  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Output: ~/Music/YouTube")
    log_success(logger, "Download complete!")
"""

import logging
import sys
from pathlib import Path
from typing import TextIO

import colorama
from colorama import Fore, Style


STEP = 22
SUCCESS = 25

logging.addLevelName(STEP, "STEP")
logging.addLevelName(SUCCESS, "SUCCESS")

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that prefixes each message with a coloured level tag.

    Tags:
        - DEBUG: [DEBUG] cyan
        - INFO: [INFO] blue
        - STEP: [STEP] magenta
        - SUCCESS: [SUCCESS] green
        - WARNING: [WARN] yellow
        - ERROR/CRITICAL: [ERROR] red
    """

    LEVEL_TAGS = {
        logging.DEBUG: ("DEBUG", Fore.CYAN),
        logging.INFO: ("INFO", Fore.BLUE),
        STEP: ("STEP", Fore.MAGENTA),
        SUCCESS: ("SUCCESS", Fore.GREEN),
        logging.WARNING: ("WARN", Fore.YELLOW),
        logging.ERROR: ("ERROR", Fore.RED),
        logging.CRITICAL: ("ERROR", Style.BRIGHT + Fore.RED),
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as "[TAG] message".

        Args:
            record: The log record to format.

        Returns:
            Formatted string, with ANSI colours if enabled.
        """
        tag, color = self.LEVEL_TAGS.get(record.levelno, (record.levelname, ""))

        if self.use_colors and color:
            prefix = f"{color}[{tag}]{Style.RESET_ALL}"
        else:
            prefix = f"[{tag}]"

        message = f"{prefix} {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class ConsoleHandler(logging.Handler):
    """
    Handler that writes ERROR and above to stderr and the rest to stdout.

    The streams are looked up at emit time (not bound at construction), so
    redirected or captured streams are honoured.
    """

    def __init__(
        self,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None
    ) -> None:
        super().__init__()
        self._stdout = stdout
        self._stderr = stderr

    def _stream_for(self, record: logging.LogRecord) -> TextIO:
        if record.levelno >= logging.ERROR:
            return self._stderr or sys.stderr
        return self._stdout or sys.stdout

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self._stream_for(record)
            stream.write(msg + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    use_colors: bool | None = None
) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        level: Console level. INFO by default, WARNING for --quiet,
               DEBUG for --verbose.
        log_file: Optional file receiving DEBUG and above. Parent
                  directories are created. The file is appended to.
        use_colors: Force colours on/off. None means "colour if stdout
                    is a terminal".

    Behavior:
        1. Make ANSI colours work on Windows consoles
        2. Configure root logger level to DEBUG
        3. Replace existing handlers with a ConsoleHandler at `level`
        4. If log_file is given, add a FileHandler at DEBUG

    Thread Safety:
        This function is NOT thread-safe. Call it once from the main thread.
    """
    colorama.just_fix_windows_console()

    if use_colors is None:
        use_colors = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = ConsoleHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredConsoleFormatter(use_colors=use_colors))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called will have no
        handlers of their own; records propagate to the root logger once
        it is configured.
    """
    return logging.getLogger(name)


def log_step(logger: logging.Logger, message: str) -> None:
    """Log a message at the STEP level."""
    logger.log(STEP, message)


def log_success(logger: logging.Logger, message: str) -> None:
    """Log a message at the SUCCESS level."""
    logger.log(SUCCESS, message)


def shutdown_logging() -> None:
    """
    Flush, close and detach all root handlers.

    Called from the CLI's finally block so the log file is complete even
    when the run ends with an error.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except Exception:
            pass
        root_logger.removeHandler(handler)
