"""Logging setup for the grid_query package."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stream handler to the ``grid_query`` logger.

    Calling this more than once only updates the level.
    """
    logger = logging.getLogger("grid_query")
    logger.setLevel(level.upper())

    if not any(getattr(h, "_grid_query_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._grid_query_handler = True
        logger.addHandler(handler)

    return logger
