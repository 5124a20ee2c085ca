"""
Logging setup for programs that drive the signmesh kernel.

Every kernel module logs through ``logging.getLogger(__name__)``, so
dropped holes, clamped profiles and skipped parts all arrive under the
``signmesh`` logger.  The kernel never installs handlers on its own.
"""
import logging
import sys
from typing import IO, Optional, Union

PACKAGE_LOGGER = "signmesh"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def _as_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"unknown log level {level!r}")
        return value
    return level


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[str] = None,
                  stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Attach a console handler, and optionally a file handler, to the
    ``signmesh`` logger.

    Args:
        level: A logging constant or its name, e.g. ``"debug"`` read from
            a configuration file.
        log_file: Optional path the log is written to (truncated first).
        stream: Console stream, ``sys.stdout`` by default.

    Returns:
        The configured package logger.  Calling again replaces the
        handlers installed by the previous call.
    """
    level = _as_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("logging configured at %s", logging.getLevelName(level))
    return logger
