"""Logging configuration for the PSY-Q signature scanner.

The scan report is written to stdout, so every log record goes to stderr.
Version scans run on worker threads; verbose output carries the thread
name so interleaved per-version messages can be told apart.
"""

import functools
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from colorama import Fore, Style, init as colorama_init

# Initialize colorama for cross-platform colored output
colorama_init(autoreset=True)

CONSOLE_FORMAT = "%(levelname)s %(message)s"
VERBOSE_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s:%(lineno)d: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when stderr is a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.MAGENTA + Style.BRIGHT,
    }

    def __init__(self, fmt: str, use_color: Optional[bool] = None):
        super().__init__(fmt, datefmt="%H:%M:%S")
        self.use_color = sys.stderr.isatty() if use_color is None else use_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color:
            return super().format(record)

        # Color a copy so file handlers sharing the record see plain text
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname:<7}{Style.RESET_ALL}"
        return super().format(colored)


def console_level(level: str, verbose: bool = False, quiet: bool = False) -> int:
    """Resolve the console threshold; ``quiet`` wins over ``verbose``."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    verbose: bool = False,
    quiet: bool = False
) -> None:
    """Set up logging for a command-line run.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file that receives every record at DEBUG.
        verbose: Show DEBUG records with timestamps and thread names.
        quiet: Show only errors, leaving the report alone on the terminal.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level(level, verbose, quiet))
    console_handler.setFormatter(ColoredFormatter(VERBOSE_FORMAT if verbose else CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    # One record per catalog request otherwise
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, typically called with ``__name__``."""
    return logging.getLogger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after its module and class."""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(f"{self.__class__.__module__}.{self.__class__.__name__}")


def log_execution_time(func):
    """Decorator logging how long a scan step took, or how long until it failed.

    Timings are logged at DEBUG; a failure is logged at WARNING and the
    exception propagates unchanged.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.warning(f"{func.__qualname__} failed after {time.perf_counter() - started:.2f}s: {e}")
            raise
        logger.debug(f"{func.__qualname__} took {time.perf_counter() - started:.2f}s")
        return result

    return wrapper
