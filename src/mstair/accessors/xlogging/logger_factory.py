# File: src/mstair/accessors/xlogging/logger_factory.py
"""
Logger factory for creating CoreLogger instances that take part in the
standard logging hierarchy (parents, propagation, caplog).
"""

import logging
import sys
from pathlib import Path

from mstair.accessors.xlogging.core_logger import CoreLogger


def create_logger(name: str, *, level: int | str | None = None) -> CoreLogger:
    """
    Return the CoreLogger registered under `name`, creating it if needed.

    `__main__` is replaced by the stem of the running script.
    """
    if name == "__main__":
        arg0 = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
        name = Path(arg0).stem or "main"

    existing = logging.Logger.manager.loggerDict.get(name)
    if isinstance(existing, CoreLogger):
        logger = existing
    else:
        logger = _get_core_logger_from_logging(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create a CoreLogger through logging.getLogger().

    Temporarily sets CoreLogger as the logger class so that the new logger gets
    its parent wired up the same way any other logger does.

    :raises TypeError: If a non-CoreLogger already owns the name.
    """
    logging_class = logging.getLoggerClass()
    logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


# End of file: src/mstair/accessors/xlogging/logger_factory.py
