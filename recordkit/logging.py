"""Logging helpers. `recordkit` only logs, it never configures handlers."""

import logging as py_logging
import traceback
import typing

from recordkit.types import LoggerLike


def log_message(
    message: str,
    level: typing.Union[int, str] = py_logging.INFO,
    logger: typing.Optional[LoggerLike] = None,
) -> None:
    """
    Log a message.

    :param level: Level number or name, e.g `logging.DEBUG` or "debug".
        Unknown names log at INFO.
    :param logger: Defaults to this module's logger.
    """
    if isinstance(level, str):
        level = getattr(py_logging, level.upper(), py_logging.INFO)
    (logger or py_logging.getLogger(__name__)).log(int(level), message)


def _raised_at(exc: BaseException) -> str:
    frame = traceback.extract_tb(exc.__traceback__)[-1]
    return f"{frame.name} ({frame.filename}:{frame.lineno})"


def log_exception(
    exc: BaseException,
    message: typing.Optional[str] = None,
    *,
    logger: typing.Optional[LoggerLike] = None,
) -> None:
    """
    Log a handled exception at ERROR, with its traceback.

    Where the exception was raised is logged at DEBUG.

    :param message: Prefix for the exception message.
    :param logger: Defaults to this module's logger.
    """
    logger = logger or py_logging.getLogger(__name__)
    logger.exception(f"{message or 'An error occurred'}: {exc}", exc_info=exc)
    if exc.__traceback__ is not None:
        logger.debug(f"{type(exc).__name__} raised in {_raised_at(exc)}")
