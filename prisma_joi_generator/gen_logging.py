"""
Logging configuration for the generation pipeline.

Usage in pipeline modules:
    from prisma_joi_generator.gen_logging import get_logger
    logger = get_logger(__name__)

The root logger name is "prisma_joi.gen". Levels are controlled by the CLI
flags and by the PRISMA_JOI_DEBUG / PRISMA_JOI_LOG_LEVEL environment variables.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager

_LOGGER_NAME = "prisma_joi.gen"

_ENV_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return a child logger under the prisma_joi.gen hierarchy.

    Args:
        name: Module __name__, or None for the root prisma_joi.gen logger.

    Returns:
        logging.Logger instance
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    # "prisma_joi_generator.pipeline.registry" -> "prisma_joi.gen.registry"
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def _level_from_env() -> int | None:
    if os.environ.get("PRISMA_JOI_DEBUG", "").strip().lower() == "true":
        return logging.DEBUG
    env_level = os.environ.get("PRISMA_JOI_LOG_LEVEL", "").strip().lower()
    return _ENV_LEVELS.get(env_level)


def configure_gen_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the prisma_joi.gen logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG
        (default)       -> INFO, unless overridden by the environment
        --quiet / -q    -> WARNING

    Args:
        verbose: Enable DEBUG-level output.
        quiet:   Suppress INFO output (WARNING+ only).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = _level_from_env() or logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    # stdout is reserved for tool output, stderr carries the log
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_GenFormatter())
    root_logger.addHandler(handler)
    root_logger.propagate = False


class _GenFormatter(logging.Formatter):
    """Prefix each message with the generator name and a millisecond timestamp."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime("%H:%M:%S", time.localtime(record.created))
        message = f"Prisma Joi Generator [{timestamp}.{int(record.msecs):03d}] {record.levelname.lower()}: {record.getMessage()}"
        if record.exc_info and record.levelno <= logging.DEBUG:
            message += "\n" + self.formatException(record.exc_info)
        return message


@contextmanager
def timed(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Log the wall-clock duration of the enclosed block at debug level."""
    start = time.perf_counter()
    logger.debug("Starting: %s", operation)
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("%s: %.0fms", operation, elapsed_ms)
