"""
Logging setup for hexwfc.

Everything under the "hexwfc" logger goes to a rotating <log_dir>/debug.log
at DEBUG, and to stderr at WARNING unless the CLI asks for more. Catalog
compilation, solver steps and generation attempts are logged as
pipe-separated lines by the log_* helpers below.

Usage:
    from hexwfc.logging_config import setup_logging
    setup_logging(log_dir)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "debug.log"
MAX_LOG_SIZE = 10 * 1024 * 1024
BACKUP_COUNT = 5

ROOT_LOGGER = "hexwfc"

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-26s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)-26s | %(message)s"


def _file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT))
    return handler


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Route hexwfc logging to a file in log_dir and to stderr.

    Calling it again replaces the handlers from the previous call, so a
    process can switch log directories.

    Args:
        log_dir: Directory for debug.log (created if missing)
        log_level: Level for the file
        console_level: Level for stderr

    Returns:
        Path to the log file
    """
    log_path = Path(log_dir) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()

    root_logger.addHandler(_file_handler(log_path, log_level))
    root_logger.addHandler(_console_handler(console_level))

    root_logger.debug(f"Logging to {log_path.absolute()}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Logger for name, placed under the hexwfc logger."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_catalog(
    logger: logging.Logger,
    action: str,
    prototypes: int | None = None,
    variants: int | None = None,
    details: str | None = None,
) -> None:
    """Log catalog loading/compilation."""
    p_str = f" | prototypes={prototypes}" if prototypes is not None else ""
    v_str = f" | variants={variants}" if variants is not None else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"CATALOG | {action}{p_str}{v_str}{details_str}")


def log_solver(
    logger: logging.Logger,
    step: int,
    action: str,
    details: str | None = None,
) -> None:
    """Log solver activity."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STEP {step:05d} | SOLVER | {action}{details_str}")


def log_generation(
    logger: logging.Logger,
    attempt: int,
    status: str,
    seed: int | None = None,
    duration_ms: int | None = None,
    details: str | None = None,
) -> None:
    """Log a world generation attempt."""
    seed_str = f" | seed={seed}" if seed is not None else ""
    duration_str = f" | {duration_ms}ms" if duration_ms else ""
    details_str = f" | {details}" if details else ""
    logger.info(f"ATTEMPT {attempt:03d} | GENERATION | {status}{seed_str}{duration_str}{details_str}")
