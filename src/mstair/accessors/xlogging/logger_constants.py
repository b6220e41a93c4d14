# File: src/mstair/accessors/xlogging/logger_constants.py

import logging


K_KLASS_NAME = "klass_name"
K_ACCESSOR_NAME = "accessor_name"
K_COLOR = "color"

CONSTRUCT = logging.INFO - 1  # (19) LOG.construct() will not output at INFO level
TRACE = logging.DEBUG - 1  # (9) LOG.trace() will not output at DEBUG level


_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the custom level names with logging if not already registered."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    for key, value in {
        "TRACE": TRACE,
        "CONSTRUCT": CONSTRUCT,
    }.items():
        if key not in logging.getLevelNamesMapping():
            logging.addLevelName(value, key)


# End of file: src/mstair/accessors/xlogging/logger_constants.py
