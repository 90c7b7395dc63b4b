"""Logging configuration."""

import logging
import os
import sys

from pydantic import BaseModel, Field


class LogConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    # Third-party loggers held at WARNING regardless of level
    quiet_loggers: list[str] = Field(
        default_factory=lambda: ["sqlalchemy.engine", "aiosqlite", "httpx", "uvicorn.access"]
    )


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger and align the service's own loggers with it."""
    if config is None:
        config = LogConfig()

    level = config.level.upper()
    logging.basicConfig(
        level=getattr(logging, level),
        format=config.format,
        datefmt=config.date_format,
        stream=sys.stdout,
        force=True,
    )

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Module loggers are created at import, before settings are known
    for name, logger in logging.root.manager.loggerDict.items():
        if name == "app" or name.startswith("app."):
            if isinstance(logger, logging.Logger):
                logger.setLevel(level)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger for a module of the service.

    Args:
        name: Module name (typically __name__)
        level: Optional level; LOG_LEVEL from the environment otherwise

    Returns:
        Logger at the requested level
    """
    logger = logging.getLogger(name)
    logger.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    return logger
