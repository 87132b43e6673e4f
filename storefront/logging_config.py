# storefront/logging_config.py

"""Logging setup for the catalog service.

All ``storefront.*`` loggers share one console handler. Call
:func:`setup_logging` once at application start; repeated calls only adjust
the level.
"""

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> logging.Logger:
    root_logger = logging.getLogger("storefront")
    root_logger.setLevel(level.upper())

    # Prevent duplicate handlers on repeated calls (e.g. tests)
    if root_logger.handlers:
        return root_logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False
    return root_logger
