"""
Diagnostic logging setup.

Library modules log through ``logging.getLogger(__name__)`` and never touch
handlers. Entry points call ``configure_logging`` once to route the
``layerkv`` logger to stderr.
"""

import logging as _logging
import sys as _sys
import typing as _typing

import layerkv.constants as constants

LOGGER_NAME = "layerkv"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_HANDLER_ATTR = "_layerkv_handler"


def configure_logging(
    level: str | int = constants.DEFAULT_LOG_LEVEL,
    *,
    stream: _typing.TextIO | None = None,
) -> _logging.Logger:
    """
    Attach a stream handler to the ``layerkv`` logger and set its level.

    Calling this again replaces the handler installed by the previous call
    instead of adding another one.

    Args:
        level: Level name (case-insensitive) or numeric level.
        stream: Where to write records (default: stderr).

    Returns:
        The configured ``layerkv`` logger.

    Raises:
        ValueError: If level is not a known level name.
    """
    if isinstance(level, str):
        numeric = _logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = numeric

    logger = _logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_ATTR, False):
            logger.removeHandler(existing)

    handler = _logging.StreamHandler(stream if stream is not None else _sys.stderr)
    handler.setFormatter(_logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
