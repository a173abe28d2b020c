"""
Logging helpers for forest inventory analysis.

Modules obtain loggers with ``get_logger(__name__)``. The library only attaches
a ``NullHandler`` to its package logger; applications call ``setup_logging``
to see output.
"""
import logging
from typing import Optional, Union

PACKAGE_LOGGER_NAME = 'forest_inventory'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module in this package.

    Args:
        name: Module name, normally ``__name__``

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    fmt: Optional[str] = None
) -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this more than once replaces the previously installed handler
    instead of stacking duplicates.

    Args:
        level: Logging level (e.g. ``logging.DEBUG`` or ``"DEBUG"``)
        fmt: Optional log record format string

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, '_forest_inventory_console', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler._forest_inventory_console = True
    logger.addHandler(handler)
    return logger


def log_projection_summary(logger: logging.Logger, model_name: str, years: int,
                           start_ba: float, end_ba: float, start_tpa: float,
                           end_tpa: float) -> None:
    """Log a one-line summary of a growth projection."""
    logger.debug(
        "%s projection over %d years: BA %.1f -> %.1f sq ft/ac, TPA %.1f -> %.1f",
        model_name, years, start_ba, end_ba, start_tpa, end_tpa
    )
