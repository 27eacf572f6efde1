# expense_tracker/log.py
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import get_log_dir, get_log_level

LOGGER_NAME = "expense_tracker"

_configured = False


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger once.

    Console output always; a rotating file (5MB x 5) under ``log_dir`` when one is
    given or ``LOG_DIR`` is set.
    """
    global _configured
    logger = logging.getLogger(LOGGER_NAME)
    if _configured:
        return logger

    logger.setLevel(level or get_log_level())

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
    logger.addHandler(console_handler)

    log_dir = log_dir or get_log_dir()
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, "expense_tracker.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s")
        )
        logger.addHandler(file_handler)

    _configured = True
    logger.debug("Logger initialized")
    return logger
