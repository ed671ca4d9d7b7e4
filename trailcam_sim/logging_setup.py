"""History log for the trail camera simulator.

One shared logger writes ``[time] [LEVEL] [TAG] message`` lines to a rotating
file. The tag names the subsystem that logged (``STORE``, ``CLOCK``, ...).
"""

from __future__ import annotations

import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from trailcam_sim.config import get_env, settings

LOGGER_NAME = "trailcam_sim.history"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5 MB per log file
DEFAULT_BACKUP_COUNT = 7
DEFAULT_TAG = "GEN"

# Module keyword -> tag. First match wins.
TAG_MAP = {
    "store": "STORE",
    "clock": "CLOCK",
    "session": "SESS",
    "storage": "PERSIST",
    "mapper": "PERSIST",
    "cli": "CLI",
}


class TaggedLogger(logging.LoggerAdapter):
    """Logger adapter that stamps every record with its subsystem tag."""

    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("tag", self.extra.get("tag", DEFAULT_TAG))
        return msg, kwargs


def _resolve_level(level: Optional[str]) -> int:
    name = str(level or get_env("TRAILCAM_LOG_LEVEL", default=settings.TRAILCAM_LOG_LEVEL)).upper()
    numeric_level = logging.getLevelName(name)
    if isinstance(numeric_level, int):
        return numeric_level
    print(f"trailcam logger: unknown log level '{name}', defaulting to INFO.", file=sys.stderr)
    return logging.INFO


def _build_formatter() -> logging.Formatter:
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] [%(tag)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    formatter.converter = time.gmtime
    return formatter


def _file_handler(path: Path, max_bytes: int, backup_count: int) -> logging.Handler:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    except OSError as exc:
        print(f"trailcam logger: unable to access log file {path}: {exc}; logging to stderr.", file=sys.stderr)
        return logging.StreamHandler(sys.stderr)


def _console_enabled() -> bool:
    return str(get_env("TRAILCAM_LOG_TO_CONSOLE", default=False)).lower() in ("true", "1", "yes", "on")


def configure_logging(
    *,
    log_path: Optional[Path] = None,
    level: Optional[str] = None,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
    force: bool = False,
) -> logging.Logger:
    """Attach the rotating history handler to the shared logger.

    A logger that already has handlers is left alone (apart from ``level``)
    unless ``force`` is set or a new ``log_path`` is given.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers and not force and log_path is None:
        if level is not None:
            logger.setLevel(_resolve_level(level))
        return logger

    reset_logging()
    logger.setLevel(_resolve_level(level))
    logger.propagate = False

    formatter = _build_formatter()
    handlers = [
        _file_handler(
            Path(log_path) if log_path is not None else settings.log_path,
            max_bytes or DEFAULT_MAX_BYTES,
            backup_count or DEFAULT_BACKUP_COUNT,
        )
    ]
    if _console_enabled():
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(tag: str = DEFAULT_TAG) -> TaggedLogger:
    """Tagged view of the shared logger, configuring it on first use."""
    return TaggedLogger(configure_logging(), {"tag": tag})


def get_tag_for_module(module_name: str) -> str:
    module_name = module_name.lower()
    for key, tag in TAG_MAP.items():
        if key in module_name:
            return tag
    return DEFAULT_TAG


def reset_logging() -> None:
    """Close and detach every handler so the logger can be set up again."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
