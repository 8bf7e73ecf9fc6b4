"""
Logging setup for the zoo.

Diagnostics only: every zoo.* logger writes DEBUG and up to a rotating
<data_dir>/debug.log, and WARNING and up to stderr. Narrative lines shown to
zoo visitors go to the Journal, not here.

Usage:
    from zoo.logging_config import setup_logging
    setup_logging(settings.data_dir)  # once, at startup

The log_* helpers below keep diagnostic lines greppable by area
(EVENT, FEEDING, CYCLE, STORAGE, JOURNAL).
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path


ROOT_LOGGER = "zoo"
LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-30s | %(funcName)-25s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_announced = False


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Route zoo.* loggers to the debug file and the console.

    Safe to call again (e.g. with another data directory): previous handlers
    are closed and replaced.

    Args:
        data_root: Data directory; created if missing
        log_level: Threshold for the file handler
        console_level: Threshold for stderr

    Returns:
        Path to the log file
    """
    global _announced

    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    zoo_logger = logging.getLogger(ROOT_LOGGER)
    zoo_logger.setLevel(logging.DEBUG)
    _remove_handlers(zoo_logger)
    zoo_logger.addHandler(_file_handler(log_path, log_level))
    zoo_logger.addHandler(_console_handler(console_level))

    if not _announced:
        zoo_logger.info(f"Zoo logging started at {datetime.now().isoformat()} -> {log_path.absolute()}")
        _announced = True

    return log_path


def _remove_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Logger under the zoo namespace (names outside it are prefixed)."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_event(
    logger: logging.Logger,
    event_type: str,
    details: str | None = None,
) -> None:
    """Log an event being dispatched."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"EVENT | {event_type}{details_str}")


def log_feeding(
    logger: logging.Logger,
    enclosure: str,
    status: str,
    animal: str | None = None,
    details: str | None = None,
) -> None:
    """Log feeding sequence progress."""
    animal_str = f" | animal={animal}" if animal else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"FEEDING | {enclosure} | {status}{animal_str}{details_str}")


def log_cycle(
    logger: logging.Logger,
    day: int,
    status: str,
    details: str | None = None,
) -> None:
    """Log day/night cycle activity."""
    details_str = f" | {details}" if details else ""
    logger.info(f"CYCLE | DAY {day:04d} | {status}{details_str}")


def log_storage(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    success: bool = True,
    details: str | None = None,
) -> None:
    """Log storage operations (SQLite)."""
    status = "OK" if success else "FAILED"
    path_str = f" | {path}" if path else ""
    details_str = f" | {details}" if details else ""
    level = logging.DEBUG if success else logging.ERROR
    logger.log(level, f"STORAGE | {operation}{path_str} | {status}{details_str}")


def log_journal(
    logger: logging.Logger,
    operation: str,
    path: Path | str | None = None,
    details: str | None = None,
) -> None:
    """Log journal file operations."""
    path_str = f" | {path}" if path else ""
    details_str = f" | {details}" if details else ""
    logger.info(f"JOURNAL | {operation}{path_str}{details_str}")
