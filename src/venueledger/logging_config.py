"""Logging setup for the command line entry point.

Library modules only create ``logging.getLogger(__name__)`` loggers; the CLI
calls ``setup_logging`` once to attach a stderr handler.
"""

import logging

import click

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that emit a line per query or connection
NOISY_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "asyncio")


class ClickEchoHandler(logging.Handler):
    """Write records to whatever stderr click sees at emit time."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Configure the ``venueledger`` logger.

    Args:
        level: Level name (e.g. "INFO") or number

    Returns:
        The configured package logger

    Raises:
        ValueError: If the level name is not recognized
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level '{level}'")
        level = resolved

    logger = logging.getLogger("venueledger")
    logger.setLevel(level)

    # Replace the handler from a previous call (tests invoke the CLI repeatedly)
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)
    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
