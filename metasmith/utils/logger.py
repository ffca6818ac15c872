"""Logging helpers for the Metasmith enhancer.

All module loggers live under the ``metasmith`` namespace so applications
can tune the whole library with one ``logging.getLogger("metasmith")`` call.
Nothing here attaches handlers on import.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "metasmith"


class LabeledFormatter(logging.Formatter):
    """Prefix each record with a short level label and the module name."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        message = f"{label} [{record.name}] {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the ``metasmith`` root logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the ``metasmith`` root logger.

    Calling this more than once replaces the previous handler instead of
    stacking duplicates.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_metasmith_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(LabeledFormatter())
    handler._metasmith_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
