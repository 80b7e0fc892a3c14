"""
Centralized logging configuration for the package.
"""
import logging
from contextlib import contextmanager
from typing import Union

LEVEL_MAP = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

DEFAULT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"

def setup_logger(name: str,
                 level: Union[int, str] = logging.WARNING,
                 formatter: logging.Formatter = None,
                 force: bool = False,
                 propagate: bool = False) -> logging.Logger:
    """Set up a logger with a single stream handler.

    Parameters
    ----------
    name : str
        The name of the logger, usually ``__name__`` of the calling module.
    level : int or str
        The logging level for the logger, as an int or a name such as ``"DEBUG"``.
    formatter : logging.Formatter, optional
        The formatter to use for the handler.
    force : bool, optional
        If True, clear existing handlers before attaching a new one.
    propagate : bool, optional
        If True, records also propagate to the parent logger.

    Returns
    -------
    logging.Logger
        The configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if force:
        logger.handlers.clear()

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        if formatter is None:
            formatter = logging.Formatter(DEFAULT_FORMAT, datefmt="%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = propagate
    return logger

def resolve_level(level):
    """Map a level name such as ``"debug"`` or an int to a ``logging`` level; unknown names give WARNING."""
    if isinstance(level, str):
        return LEVEL_MAP.get(level.upper(), logging.WARNING)
    return int(level)

def package_loggers():
    """Every logger created so far under the package namespace."""
    top_level_name = __name__.split('.', maxsplit=1)[0]
    return [
        logger_instance
        for logger_name, logger_instance in logging.root.manager.loggerDict.items()
        if (logger_name == top_level_name or logger_name.startswith(top_level_name + '.'))
        and isinstance(logger_instance, logging.Logger)
    ]

def set_package_log_level(level='WARNING'):
    """Set the log level for every logger created under the package.

    ``level`` is a name such as ``"DEBUG"`` or a ``logging`` integer level.
    """
    level = resolve_level(level)
    for logger_instance in package_loggers():
        logger_instance.setLevel(level)

@contextmanager
def package_log_level(level='DEBUG'):
    """
    Temporarily set every package logger to ``level``, e.g. to trace one fit.

    Examples
    --------
    >>> with package_log_level("DEBUG"):
    ...     spline = MonotonicSplineInterpolator().fit(x, y)
    """
    previous = {logger_instance: logger_instance.level for logger_instance in package_loggers()}
    set_package_log_level(level)
    try:
        yield
    finally:
        for logger_instance, previous_level in previous.items():
            logger_instance.setLevel(previous_level)


# package logger
pkg_logger = setup_logger(__name__)
