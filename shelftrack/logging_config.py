import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

from rich.logging import RichHandler

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        level=level,
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,  # book titles may contain [brackets]
    )
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(filename=path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: LogLevel = "INFO",
    log_file: Path | str | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> None:
    """Configure the root logger for the CLI.

    Console output always goes through Rich. A rotating log file is added
    only when ``log_file`` is given; if it cannot be opened the error is
    logged and console logging carries on. Calling this again replaces the
    handlers from the previous call.

    Args:
        level: The minimum logging level to capture.
        log_file: Optional path of the log file.
        max_bytes: The maximum size of the log file before rotation.
        backup_count: The number of backup log files to keep.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            root_logger.removeHandler(handler)

    root_logger.addHandler(_console_handler(log_level))

    if not log_file:
        logger.debug("File logging skipped as no log_file was provided.")
        return

    log_path = Path(log_file)
    try:
        root_logger.addHandler(_file_handler(log_path, log_level, max_bytes, backup_count))
    except OSError:
        logger.error("Failed to set up file logging to %s", log_path, exc_info=True)
        return
    logger.debug("Logging to rotating file %s", log_path)
