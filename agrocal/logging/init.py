from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging for the CLI.

Lines look like "<LABEL> <message>" with LABEL one of DEBUG, INFO, SUMMARY,
WARN, ERROR. Library modules log through logging.getLogger(__name__); their
loggers sit under "agrocal" and reach the one handler installed here.

Per-row problems also go to the JSON Lines file kept by
agrocal.logging.warning_log.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "enable_debug",
    "reset_logging",
]

LOGGER_NAME = "agrocal"
SUMMARY_LEVEL = 25  # between INFO and WARNING

_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    SUMMARY_LEVEL: "SUMMARY",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_handler: logging.Handler | None = None


class LabeledFormatter(logging.Formatter):
    """Prefix each message with its short level label (unknown levels keep their level name)."""

    def format(self, record: logging.LogRecord) -> str:
        label = _LABELS.get(record.levelno) or record.levelname
        text = record.getMessage()
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return f"{label} {text}"


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Install the labeled console handler on the "agrocal" logger; later calls are no-ops.

    The logger stops propagating so an embedding application's root
    handlers do not print every line a second time.
    """
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        return logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    _handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    _handler.setFormatter(LabeledFormatter())
    for stale in list(logger.handlers):
        logger.removeHandler(stale)
    logger.addHandler(_handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def get_logger() -> logging.Logger:
    return setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def enable_debug() -> None:
    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    logger.debug("debug mode enabled")


def reset_logging() -> None:
    """Detach the console handler and restore defaults (used between test runs)."""
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
