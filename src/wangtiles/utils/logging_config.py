"""
Logging configuration for wangtiles.

Console output is human-oriented and optionally coloured; the file log is a
rotating semicolon-separated CSV that can be opened in a spreadsheet.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..settings import AppSettings

RESET = "\033[0m"
LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the first occurrence of the level name."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = LEVEL_COLORS.get(record.levelname)
        if color is None:
            return formatted
        return formatted.replace(record.levelname, f"{color}{record.levelname}{RESET}", 1)


class CSVFormatter(logging.Formatter):
    """One semicolon-separated row per record: time, level, uptime, logger, line, message."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage().replace('"', '""')
        fields = (
            f'"{self.formatTime(record, self.datefmt)}"',
            record.levelname.ljust(8),
            f'"{int(record.relativeCreated)} ms"',
            f'"{record.name}"',
            f'"{record.lineno}"',
            f'"{message}"',
        )
        return ";".join(fields)


CONSOLE_FORMAT = "%(asctime)s : %(levelname)-8s : %(message)s"


def _console_handler(level: str, use_colors: bool) -> logging.Handler:
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler.setFormatter(formatter_class(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(CSVFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(settings: "AppSettings") -> None:
    """
    Setup logging with console and file handlers.

    Replaces any handlers already on the root logger. A log file that
    cannot be opened is reported and skipped.

    Args:
        settings: AppSettings instance for all logging configuration
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    logging.getLogger("wangtiles").setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    if settings.console_logging:
        root_logger.addHandler(
            _console_handler(settings.console_log_level, settings.console_use_colors)
        )

    file_error = None
    if settings.file_logging:
        try:
            root_logger.addHandler(_file_handler(settings.log_file_path))
        except OSError as e:
            file_error = e

    # Pillow logs every image header at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logging initialized")
    if file_error is not None:
        logger.warning(f"Could not set up file logging at {settings.log_file_path}: {file_error}")
