"""Logging configuration for the command line tools."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level="INFO"):
    """
    Send diagnostics to stderr so stdout stays free for operator output.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger()
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.handlers.clear()
    logger.addHandler(handler)
