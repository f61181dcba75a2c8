"""Logging utilities for the engine and server."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (defaults to this module)
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name or __name__)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a stdout handler to the ``appflow`` package logger.

    Module loggers (``appflow.workflows.executor`` etc.) propagate to it.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    logger = get_logger("appflow", level)
    logger.setLevel(level)
    return logger
