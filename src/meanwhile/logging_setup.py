"""Console logging for the meanwhile CLI."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "meanwhile"
_FORMAT = "%(levelname)-7s %(name)s: %(message)s"


class _MeanwhileHandler(logging.StreamHandler):
    """Marker type so repeated setup replaces our handler only."""


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Send ``meanwhile.*`` records to stderr at ``level``.

    The root logger is left alone; records still propagate to it.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _MeanwhileHandler):
            logger.removeHandler(handler)

    handler = _MeanwhileHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
