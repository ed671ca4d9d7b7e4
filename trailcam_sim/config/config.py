"""
Centralised config for the trail camera simulator.

Values are read from environment variables (and an optional ``.env`` file)
and exposed as typed, validated attributes through a singleton ``settings``
object.
"""

import os
from pathlib import Path
from typing import Any, Callable, Literal, Optional, TypeVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE = Path(__file__).resolve()


def _discover_project_root(config_file: Path) -> tuple[Path, Path]:
    """Return a project root and env file path without assuming ``.env`` exists.

    Walks the parents looking for a ``.env`` file and falls back to the
    repository root (detected via common project markers) when it is missing.
    """

    parents = list(config_file.parents)

    for parent in parents:
        env_file = parent / ".env"
        if env_file.exists():
            return parent, env_file

    for marker in ("pyproject.toml", ".git"):
        for parent in parents:
            if (parent / marker).exists():
                return parent, parent / ".env"

    fallback_root = parents[1] if len(parents) > 1 else parents[0]
    return fallback_root, fallback_root / ".env"


PROJECT_ROOT, ENV_FILE_PATH = _discover_project_root(CONFIG_FILE)

DEFAULT_STATE_PATH = Path.home() / ".config" / "trailcam_sim" / "settings.json"

T = TypeVar("T")


class Settings(BaseSettings):
    """
    Centralised and validated simulator settings.
    """
    model_config = SettingsConfigDict(
        env_file=ENV_FILE_PATH, env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # --- PERSISTENCE ---
    TRAILCAM_STATE_PATH: Path = DEFAULT_STATE_PATH
    TRAILCAM_RECORD_KEY: str = "trailcam.settings"

    # --- SIMULATION ---
    TRAILCAM_TICK_SECONDS: float = Field(1.0, gt=0)
    TRAILCAM_APPLICABILITY_POLICY: Literal["video_only", "timelapse_plus_hybrid"] = "video_only"

    # --- SIMULATED SD CARD ---
    TRAILCAM_SD_CAPACITY: int = Field(1550, ge=1)
    TRAILCAM_SD_USED: int = Field(123, ge=0)

    # --- LOGGING ---
    TRAILCAM_LOG_LEVEL: str = "INFO"
    TRAILCAM_LOG_TO_CONSOLE: bool = False
    TRAILCAM_LOG_DIR: Optional[Path] = None

    @field_validator("TRAILCAM_APPLICABILITY_POLICY", mode="before")
    @classmethod
    def _normalise_policy(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("TRAILCAM_RECORD_KEY")
    @classmethod
    def _require_record_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("TRAILCAM_RECORD_KEY must not be empty")
        return value

    # --- DYNAMIC FILE PATHS ---
    @property
    def log_path(self) -> Path:
        """
        Path for the simulator history log.

        Uses ``TRAILCAM_LOG_DIR`` when it is writable and otherwise falls
        back to a directory in the user's home. Never raises.
        """
        try:
            log_dir = self.TRAILCAM_LOG_DIR
            if log_dir is None:
                raise PermissionError("TRAILCAM_LOG_DIR is not set")
            log_dir.mkdir(parents=True, exist_ok=True)
            if not os.access(log_dir, os.W_OK):
                raise PermissionError(f"No write access to {log_dir}")
            return log_dir / "trailcam_history.log"
        except OSError:
            fallback_dir = Path.home() / "trailcam_logs"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            return fallback_dir / "trailcam_history.log"


# Create a single, importable instance of the settings for the entire application.
settings = Settings()


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _coerce_type(raw: str, template: Any) -> Any:
    if isinstance(template, bool):
        return _to_bool(raw)
    if isinstance(template, int) and not isinstance(template, bool):
        return int(raw)
    if isinstance(template, float):
        return float(raw)
    if isinstance(template, Path):
        return Path(raw)
    return raw


def get_env(
    name: str,
    default: T | None = None,
    *,
    parser: Callable[[str], T] | None = None,
) -> T | Any | None:
    """Return a configuration value resolving environment overrides consistently.

    The resolution order is:

    1. Explicit environment variable overrides at runtime.
    2. Typed values provided by the Pydantic ``settings`` object.
    3. The supplied ``default`` value.

    When an override is read directly from :mod:`os.environ`, ``parser`` (or the
    inferred type from ``settings``) is used to coerce the string into the
    expected type.
    """

    if name in os.environ:
        raw_value = os.environ[name]
        if parser is not None:
            return parser(raw_value)
        if hasattr(settings, name):
            template = getattr(settings, name)
            try:
                return _coerce_type(raw_value, template)
            except (TypeError, ValueError):
                return template
        return raw_value

    if hasattr(settings, name):
        value = getattr(settings, name)
        return default if value is None and default is not None else value

    return default
