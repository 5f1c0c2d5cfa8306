"""
Logging configuration for the tagfs client.

The package logs through ``logging.getLogger(__name__)`` and installs no
handlers on import; hosts opt in to console output here.
"""

import logging
import sys

_LOGGER_NAME = "tagfs_client"


def enable_debug_mode() -> logging.Handler:
    """Enable debug-level logging for the client to stderr.

    Returns the stderr handler (an existing one is reused).
    """
    client_logger = logging.getLogger(_LOGGER_NAME)
    client_logger.setLevel(logging.DEBUG)

    for handler in client_logger.handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr:
            return handler

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    ))
    client_logger.addHandler(handler)
    return handler
