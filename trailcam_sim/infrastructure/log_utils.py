"""Utility helpers for writing the simulator history log with tagging support."""

from __future__ import annotations

import inspect
import logging
from typing import Dict

from trailcam_sim.logging_setup import get_logger, get_tag_for_module

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _caller_module_name() -> str:
    """Name of the first module on the stack outside this one."""
    for frame_info in inspect.stack()[1:]:
        module = inspect.getmodule(frame_info.frame)
        module_name = getattr(module, "__name__", "unknown")
        if module_name != __name__:
            return module_name
    return "unknown"


def log_message(msg: str, level: str = "INFO", tag: str | None = None, **kwargs) -> None:
    """
    Log a message to the rotating history log with optional tagging.

    Accepts **kwargs for compatibility with standard logging arguments
    like exc_info=True.
    """
    if tag is None:
        tag = get_tag_for_module(_caller_module_name())

    logger = get_logger(tag)

    level_name = str(level).upper()
    numeric_level = _LEVEL_MAP.get(level_name)
    if numeric_level is None:
        logger.warning(
            "Received unknown log level '%s'; defaulting to INFO. Message: %s",
            level,
            msg,
        )
        numeric_level = logging.INFO

    logger.log(numeric_level, msg, **kwargs)


# ----------------------------------------------------------------------
# Convenience wrappers
# ----------------------------------------------------------------------

def debug(msg: str, tag: str | None = None, **kwargs):
    log_message(msg, level="DEBUG", tag=tag, **kwargs)


def info(msg: str, tag: str | None = None, **kwargs):
    log_message(msg, level="INFO", tag=tag, **kwargs)


def warn(msg: str, tag: str | None = None, **kwargs):
    log_message(msg, level="WARNING", tag=tag, **kwargs)


def error(msg: str, tag: str | None = None, **kwargs):
    log_message(msg, level="ERROR", tag=tag, **kwargs)
