"""Logging setup utilities for levelctl.

Every lifecycle event of the daemon (connect, message, action, disconnect,
error, server start, server error, restart countdown) is emitted under the
``levelctl`` logger. The listener starts uvicorn with ``log_config=None``,
so uvicorn's own loggers are wired to the same handlers here.
"""

from __future__ import annotations

import logging
import sys

from levelctl.config.settings import LoggingConfig

PACKAGE_LOGGER = "levelctl"
UVICORN_LOGGER = "uvicorn"
UVICORN_ACCESS_LOGGER = "uvicorn.access"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the levelctl application.

    Sets up the package logger and the ``uvicorn`` logger tree with the
    specified level, format, and optional file handler. Calling it again
    replaces the handlers it installed earlier rather than stacking
    duplicates.

    Per-request access lines are only shown at DEBUG; at any other level
    the ``uvicorn.access`` logger is held at WARNING.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    handlers = _build_handlers(config)

    package_logger = _install(PACKAGE_LOGGER, level, handlers)

    _install(UVICORN_LOGGER, level, handlers).propagate = False
    logging.getLogger(UVICORN_ACCESS_LOGGER).setLevel(
        logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    )

    package_logger.info("Logging initialized at %s level", config.level)


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    formatter = logging.Formatter(config.format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._levelctl = True  # type: ignore[attr-defined]
    return handlers


def _install(name: str, level: int, handlers: list[logging.Handler]) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_levelctl", False):
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    return logger
