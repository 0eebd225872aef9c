"""Centralized logging configuration for the API server."""

from __future__ import annotations

import logging
import os
from typing import Iterable

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOG_LEVEL_ENV = "WAR_TRACKER_LOG_LEVEL"

# The MongoDB driver logs every command and heartbeat at DEBUG.
DRIVER_LOGGERS = ("pymongo", "motor")


def configure_logging(
    *,
    level: str | None = None,
    format: str = DEFAULT_FORMAT,
    datefmt: str = DEFAULT_DATEFMT,
    include_uvicorn: bool = True,
    quiet_driver: bool = True,
    extra_loggers: Iterable[str] | None = None,
) -> logging.Logger:
    """Configure application logging.

    Args:
        level: Optional explicit log level. Falls back to the
            ``WAR_TRACKER_LOG_LEVEL`` env var, then INFO.
        format: Log format string.
        datefmt: Date format string.
        include_uvicorn: Whether to align uvicorn loggers with the app level.
        quiet_driver: Keep the MongoDB driver loggers at WARNING or above
            even when the app runs at DEBUG.
        extra_loggers: Additional logger names to align with the configured level.

    Returns:
        The application logger (``warapi``).
    """

    raw_level = level if level is not None else os.getenv(LOG_LEVEL_ENV)
    resolved_level = (raw_level or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=format, datefmt=datefmt)

    app_logger = logging.getLogger("warapi")
    app_logger.setLevel(resolved_level)

    if include_uvicorn:
        for uvicorn_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(uvicorn_logger).setLevel(resolved_level)

    driver_level = logging.getLevelName(resolved_level)
    if quiet_driver:
        driver_level = max(logging.WARNING, driver_level)
    for driver_logger in DRIVER_LOGGERS:
        logging.getLogger(driver_logger).setLevel(driver_level)

    if extra_loggers:
        for logger_name in extra_loggers:
            logging.getLogger(logger_name).setLevel(resolved_level)

    app_logger.debug("Logging configured at %s", resolved_level)
    return app_logger
