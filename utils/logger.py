"""
Logging configuration
"""
import logging
import os
import sys
from typing import Set

from config.settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Names of the loggers configured by get_logger
_configured: Set[str] = set()


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance with configured settings

    Logs go to stderr (stdout is reserved for the JSON report) and, when
    LOG_FILE is set, to that file as well.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if name in _configured:
        return logger

    logger.setLevel(_level(settings.LOG_LEVEL))
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.LOG_FILE:
        os.makedirs(os.path.dirname(settings.LOG_FILE) or '.', exist_ok=True)
        file_handler = logging.FileHandler(settings.LOG_FILE, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured.add(name)
    return logger


def set_log_level(level: str):
    """Change the level of every logger created through get_logger (e.g. for --debug)"""
    for name in _configured:
        logging.getLogger(name).setLevel(_level(level))
