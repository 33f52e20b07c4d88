"""Logging setup shared by the CLI, the service and the pipeline stages."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Optional

_LOGGER_NAME = "codescribe"
LOG_LEVEL_ENV = "CODESCRIBE_LOG_LEVEL"
CONSOLE_FORMAT = "[codescribe] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Stage loggers live under ``codescribe.<name>``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(verbose: bool = False) -> int:
    """``--verbose`` wins; otherwise CODESCRIBE_LOG_LEVEL, otherwise INFO."""
    if verbose:
        return logging.DEBUG
    requested = (os.getenv(LOG_LEVEL_ENV) or "").strip().upper()
    level = logging.getLevelName(requested) if requested else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Install a console handler (stderr by default) and an optional file sink."""
    level = resolve_level(verbose)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "resolve_level"]
