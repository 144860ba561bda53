"""
Logging Configuration Module.

Centralized logging setup for the YQPayNow backend. The server calls
:func:`setup_logging` once at import time; every other module only asks for a
named logger through :func:`get_logger`.

Defaults come from the server settings (``YQPAYNOW_LOG_LEVEL``,
``LOG_FORMAT``, ``LOG_FILE_DIR``, ``ENABLE_FILE_LOGGING``). Order, QR and SMS
services log at DEBUG so a single theater's activity can be traced, while
SQLAlchemy, httpx and Pillow are held at WARNING.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from yqpaynow.server.core.config import settings

LOG_LEVEL = settings.log_level.upper()
LOG_FORMAT = settings.log_format
LOG_FILE_DIR = settings.log_file_dir
ENABLE_FILE_LOGGING = settings.enable_file_logging
LOG_FILE_NAME = "yqpaynow.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

FORMATS: Dict[str, str] = {
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
    "json": JSON_FORMAT,
}

MODULE_LOG_LEVELS: Dict[str, str] = {
    "yqpaynow": "INFO",
    "yqpaynow.core.database": "INFO",
    "yqpaynow.client": "INFO",
    "yqpaynow.notifications": "DEBUG",
    "yqpaynow.qr": "INFO",
    "yqpaynow.server.api": "DEBUG",
    "yqpaynow.server.services": "DEBUG",
    # Third-party libraries
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "PIL": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


def _handlers(level: str, formatter: logging.Formatter, file_logging: bool) -> List[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    handlers: List[logging.Handler] = [console]

    if file_logging:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        # The file always keeps DEBUG so incidents can be replayed.
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)
    return handlers


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger.

    Existing root handlers are replaced, so calling this twice is safe.

    Args:
        log_level: Console level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format override (simple, detailed, json); unknown names fall back to detailed
        enable_file: Write to ``LOG_FILE_DIR/yqpaynow.log`` when file logging is also enabled globally
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    file_logging = enable_file and ENABLE_FILE_LOGGING
    formatter = logging.Formatter(FORMATS.get(fmt, DETAILED_FORMAT), datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in _handlers(level, formatter, file_logging):
        root_logger.addHandler(handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Named logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)
