"""Logging configuration using loguru.

Stdlib logging (uvicorn, httpx, asyncio) is routed into loguru so the
runtime has one format.  With ``GENCOMP_DEBUG_AGENT`` on, a rotating
``runtime.log`` is also written next to the per-invocation agent logs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "watchfiles")


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the original call-site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Make loguru the only sink.  Call once, before uvicorn starts serving."""
    level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file is not None:
        logger.add(log_file, level="DEBUG", format=LOG_FORMAT, rotation="10 MB", retention=5, colorize=False)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging initialised (level={}, file={})", level, log_file or "-")
