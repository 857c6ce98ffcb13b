"""
Logging setup for cm-gpt-service.

Strategy:
- logs/system.log: regular operation log (INFO+)
- logs/error.log: failures with stack traces (ERROR/CRITICAL)
- console: startup banner and warnings (INFO+ by default, the service runs in a container)

RotatingFileHandler keeps log files bounded.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGS_DIR = Path(os.getenv("CM_SERVICE_LOG_DIR", "") or Path(__file__).parent.parent / "logs")

MAX_BYTES = 5 * 1024 * 1024  # 5MB
BACKUP_COUNT = 3

ROOT_LOGGER_NAME = "cm_service"


def setup_logging(
    log_level: int = logging.INFO,
    console_level: int = logging.INFO,
    logs_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Initialize the service logger.

    Args:
        log_level: file log level (default INFO)
        console_level: console log level (default INFO)
        logs_dir: override for the log directory

    Returns:
        the configured root service logger
    """
    target_dir = Path(logs_dir) if logs_dir else LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # handlers filter

    # avoid duplicate handlers on re-init
    logger.handlers.clear()

    file_format = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_format = logging.Formatter(
        "[%(levelname)s] %(name)s: %(message)s"
    )

    system_handler = RotatingFileHandler(
        target_dir / "system.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    system_handler.setLevel(log_level)
    system_handler.setFormatter(file_format)
    logger.addHandler(system_handler)

    error_handler = RotatingFileHandler(
        target_dir / "error.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_format)
    logger.addHandler(error_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a module logger under the service namespace.

    Args:
        name: module name, e.g. "completion", "api"
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)
