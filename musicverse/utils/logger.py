"""
Logging for Music Verse

Two audiences, two outputs: the terminal only gets what a user needs to see
(warnings, errors and records logged through ``console_info``), while the
optional rotating log file keeps the technical trail at the configured level.
Console lines are written through tqdm so batch progress bars stay intact.
"""

import functools
import logging
import logging.handlers
import re
import sys
import time
from pathlib import Path
from typing import Optional

import colorama
from colorama import Fore, Back, Style
from tqdm import tqdm

from ..config.settings import get_settings
from .helpers import SIZE_UNITS


colorama.init()

FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# yt-dlp and the HTTP stack are reported through our own messages
QUIET_LIBRARIES = ('yt_dlp', 'urllib3', 'requests')

USER_FACING = 'console_output'


class ConsoleMessageFilter(logging.Filter):
    """Pass warnings and above, plus records explicitly marked for the user"""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING or getattr(record, USER_FACING, False)


class ColoredFormatter(logging.Formatter):
    """Colour whole console lines by severity; user-facing INFO stays plain"""

    LEVEL_STYLES = {
        logging.DEBUG: Style.DIM,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.WHITE + Back.RED + Style.BRIGHT,
    }

    def __init__(self, fmt: str = '%(message)s', use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        style = self.LEVEL_STYLES.get(record.levelno) if self.use_colors else None
        if not style:
            return message
        return f"{style}{message}{Style.RESET_ALL}"


class ProgressHandler(logging.StreamHandler):
    """Stream handler that prints above an active tqdm bar instead of through it"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except Exception:
            self.handleError(record)


def parse_size(size_str: str) -> int:
    """
    Parse a rotation size such as "10MB" or "512 KB" into bytes

    Uses the same binary units as ``format_file_size``.

    Raises:
        ValueError: If the string is not a number followed by a known unit
    """
    match = re.fullmatch(r'(\d+(?:\.\d+)?)\s*([A-Z]+)', size_str.strip().upper())
    if not match or match.group(2) not in SIZE_UNITS:
        raise ValueError(f"Invalid size format: {size_str}")

    number, unit = match.groups()
    return int(float(number) * 1024 ** SIZE_UNITS.index(unit))


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3
) -> None:
    """
    Replace the root handlers with the console and file handlers

    Safe to call repeatedly; every call starts from a clean root logger.

    Args:
        level: Threshold for the log file
        log_file: Log file path, None for no file
        console_output: Show user-facing messages on stdout
        colored_output: Colour console lines by severity
        max_size: Size at which the log file rotates
        backup_count: Rotated files to keep
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.DEBUG)

    if console_output:
        console = ProgressHandler(sys.stdout)
        console.addFilter(ConsoleMessageFilter())
        console.setFormatter(ColoredFormatter(use_colors=colored_output))
        root_logger.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=parse_size(max_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for name in QUIET_LIBRARIES:
        library_logger = logging.getLogger(name)
        library_logger.setLevel(logging.CRITICAL)
        library_logger.propagate = False

    logging.getLogger('musicverse').debug(f"Logging ready (level={level}, file={log_file or 'none'})")


def get_logger(name: str) -> logging.Logger:
    """
    Module logger with a ``console_info`` shortcut for messages meant for the user
    """
    logger = logging.getLogger(name)
    if not hasattr(logger, 'console_info'):
        logger.console_info = functools.partial(logger.info, extra={USER_FACING: True})
    return logger


def configure_from_settings() -> None:
    """Apply the ``logging`` section of the current settings"""
    settings = get_settings()
    config = settings.logging

    log_file = None
    if config.file:
        log_file = Path(config.file).expanduser()
        if not log_file.is_absolute():
            log_file = settings.get_config_directory() / log_file

    setup_logging(
        level=config.level,
        log_file=str(log_file) if log_file else None,
        console_output=config.console_output,
        colored_output=config.colored_output,
        max_size=config.max_size,
        backup_count=config.backup_count
    )


class OperationLogger:
    """
    Progress reporting for a counted run of steps, such as a batch of downloads

    With ``show_progress`` a tqdm bar tracks the steps; without it each step is
    only written to the log file.
    """

    def __init__(self, logger: logging.Logger, operation_name: str, show_progress: bool = True):
        self.logger = logger
        self.operation_name = operation_name
        self.show_progress = show_progress
        self.started_at: Optional[float] = None
        self.bar: Optional[tqdm] = None

    def start(self, total: int, message: Optional[str] = None) -> None:
        self.started_at = time.perf_counter()
        self.logger.console_info(message or f"🚀 {self.operation_name}: {total} to go")
        if self.show_progress and total:
            self.bar = tqdm(
                total=total,
                desc=f"🎵 {self.operation_name}",
                unit='url',
                ncols=90,
                colour='magenta',
            )

    def advance(self, label: str) -> None:
        """Mark one step as done"""
        self.logger.debug(f"{self.operation_name}: finished {label}")
        if self.bar is not None:
            self.bar.update(1)

    def complete(self, message: Optional[str] = None) -> None:
        self._close_bar()
        self.logger.console_info(message or f"✅ {self.operation_name} finished")
        if self.started_at is not None:
            self.logger.debug(f"{self.operation_name} took {time.perf_counter() - self.started_at:.2f}s")

    def error(self, message: str, exception: Optional[Exception] = None) -> None:
        self._close_bar()
        self.logger.error(f"❌ {self.operation_name} failed: {message}", exc_info=exception)

    def _close_bar(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None


def create_operation_logger(name: str, operation: str, show_progress: bool = True) -> OperationLogger:
    return OperationLogger(get_logger(name), operation, show_progress)


def log_performance(func):
    """Record how long the wrapped call took, at DEBUG level"""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        started = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug(f"{func.__qualname__} took {time.perf_counter() - started:.3f}s")

    return wrapper
