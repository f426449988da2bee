"""
Logging configuration.

Modules log through logging.getLogger(__name__); this sets up the single
stderr handler for the process.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "registration-flow"


def configure_logging(level: str = "INFO") -> None:
    """
    Route all log records to stderr at the given level.

    Safe to call repeatedly: the handler installed by a previous call is
    replaced, other handlers on the root logger are left alone.

    Args:
        level: Level name, e.g. "DEBUG" or "INFO"
    """
    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        if existing.get_name() == HANDLER_NAME:
            root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
