"""Logging helpers shared by the CLI and the analyzers."""

import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name: str, log_level: str = 'INFO', log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure and return a logger with a stream handler and an optional file handler.

    Calling it twice for the same name does not duplicate handlers.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

        if log_file:
            log_dir = os.path.dirname(os.path.abspath(log_file))
            os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under the ``contractlens`` hierarchy."""
    if name.startswith('contractlens'):
        return logging.getLogger(name)
    return logging.getLogger(f'contractlens.{name}')
