"""Verbosity levels and diagnostic logger setup."""

import logging
from enum import IntEnum

from rich.logging import RichHandler

from . import console_styles as cs

LOGGER_NAME = "vmetrics"


class Verbosity(IntEnum):
    BRIEF = 0
    VERBOSE = 1
    DEBUG = 2

    @classmethod
    def from_count(cls, count: int) -> "Verbosity":
        # 0=BRIEF, 1=VERBOSE, 2+=DEBUG
        if count >= 2:
            return cls.DEBUG
        if count >= 1:
            return cls.VERBOSE
        return cls.BRIEF


_LEVELS = {
    Verbosity.BRIEF: logging.WARNING,
    Verbosity.VERBOSE: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
}


def configure_logging(verbosity: Verbosity = Verbosity.BRIEF) -> logging.Logger:
    """Attach a rich handler to the package logger at the level for ``verbosity``."""
    logger = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=cs.get_error_console(),
            show_time=False,
            show_path=verbosity >= Verbosity.DEBUG,
            markup=False,
        )
        logger.addHandler(handler)
    logger.setLevel(_LEVELS[verbosity])
    return logger


def get_logger(name: str) -> logging.Logger:
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
