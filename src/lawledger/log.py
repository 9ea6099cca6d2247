"""Logging setup with rich console output."""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "lawledger"

_handler: RichHandler | None = None


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.WARNING)


def init_logging(level: str | int = "WARNING") -> logging.Logger:
    """Attach a rich stderr handler to the package logger.

    Calling it again only changes the level; the handler is installed once.
    """
    global _handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None:
        _handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        _handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(_handler)
    logger.setLevel(_parse_level(level))
    return logger
