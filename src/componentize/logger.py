"""Centralized logging configuration for the application."""

import logging
import sys


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
ROOT_LOGGER = "componentize"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stderr handler to the package logger once and set its level."""
    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(name)
