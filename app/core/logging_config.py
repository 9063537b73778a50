"""
Logging setup for the workspace API.

Everything goes to stdout; a rotating file is added when a log directory is
configured. Settings are logged through sanitize_log_data so tokens and
connection strings never reach the logs.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_NAME = "jobboard.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Libraries that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "stripe", "sqlalchemy.engine")

SENSITIVE_MARKERS = ("password", "token", "secret", "key", "authorization", "database_url")
REDACTED = "***REDACTED***"


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
    """
    Configure the root logger.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for jobboard.log; None or "" logs to stdout only
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of data with secret-looking values redacted.

    Keys are matched case-insensitively; unset values stay visible so a
    missing setting can still be spotted in the logs.
    """
    sanitized = dict(data)
    for key, value in sanitized.items():
        if value and any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            sanitized[key] = REDACTED
    return sanitized
