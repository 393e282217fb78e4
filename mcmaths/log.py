"""Logging setup for mcmaths.

Library modules log through ``logging.getLogger(__name__)`` and never install
handlers themselves. Scripts and drivers call :func:`get_logger` once to get
a concise stream handler on the ``mcmaths`` logger.
"""

import logging

_HANDLER_FLAG = "_mcmaths_handler"


def get_logger(name: str = "mcmaths", level: int = logging.INFO) -> logging.Logger:
    """Return a configured logger with a concise formatter.

    Idempotent: installs at most one StreamHandler per logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(int(level))
    logger.propagate = False

    has_handler = any(getattr(h, _HANDLER_FLAG, False) for h in logger.handlers)
    if not has_handler:
        handler = logging.StreamHandler()
        setattr(handler, _HANDLER_FLAG, True)
        handler.setLevel(int(level))
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        ))
        logger.addHandler(handler)
    return logger


__all__ = ["get_logger"]
