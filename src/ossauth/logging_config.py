"""Debug logging switch for the ossauth SDK."""

import logging
import sys

LOGGER_NAME = "ossauth"


def enable_debug_logging(level: int = logging.DEBUG) -> logging.Logger:
    """Send ossauth log records to stderr at ``level``.

    Only the package logger is touched; the root logger configuration of the
    host application is left alone. Calling this twice does not add a second
    handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers:
        if getattr(handler, "_ossauth_debug", False):
            handler.setLevel(level)
            return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s:%(lineno)d: %(message)s")
    )
    handler._ossauth_debug = True
    logger.addHandler(handler)
    return logger
