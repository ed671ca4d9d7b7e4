from pathlib import Path

import pytest
from pydantic import ValidationError

from trailcam_sim.config import get_env
from trailcam_sim.config.config import DEFAULT_STATE_PATH, Settings


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "TRAILCAM_STATE_PATH",
        "TRAILCAM_RECORD_KEY",
        "TRAILCAM_TICK_SECONDS",
        "TRAILCAM_APPLICABILITY_POLICY",
        "TRAILCAM_SD_CAPACITY",
        "TRAILCAM_SD_USED",
        "TRAILCAM_LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = Settings(_env_file=None)

    assert settings.TRAILCAM_STATE_PATH == DEFAULT_STATE_PATH
    assert settings.TRAILCAM_RECORD_KEY == "trailcam.settings"
    assert settings.TRAILCAM_TICK_SECONDS == 1.0
    assert settings.TRAILCAM_APPLICABILITY_POLICY == "video_only"
    assert settings.TRAILCAM_SD_CAPACITY == 1550
    assert settings.TRAILCAM_SD_USED == 123


def test_environment_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("TRAILCAM_STATE_PATH", str(tmp_path / "state.json"))
    clean_env.setenv("TRAILCAM_TICK_SECONDS", "0.25")
    clean_env.setenv("TRAILCAM_APPLICABILITY_POLICY", " Timelapse_Plus_Hybrid ")

    settings = Settings(_env_file=None)

    assert settings.TRAILCAM_STATE_PATH == tmp_path / "state.json"
    assert settings.TRAILCAM_TICK_SECONDS == 0.25
    assert settings.TRAILCAM_APPLICABILITY_POLICY == "timelapse_plus_hybrid"


@pytest.mark.parametrize(
    "overrides",
    [
        {"TRAILCAM_TICK_SECONDS": 0},
        {"TRAILCAM_TICK_SECONDS": -1.5},
        {"TRAILCAM_APPLICABILITY_POLICY": "photo_only"},
        {"TRAILCAM_RECORD_KEY": "   "},
        {"TRAILCAM_SD_CAPACITY": 0},
    ],
)
def test_invalid_values_are_rejected(clean_env: pytest.MonkeyPatch, overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_log_path_uses_configured_directory(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    settings = Settings(_env_file=None, TRAILCAM_LOG_DIR=tmp_path / "logs")

    assert settings.log_path == tmp_path / "logs" / "trailcam_history.log"
    assert (tmp_path / "logs").is_dir()


def test_log_path_falls_back_to_home(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("HOME", str(tmp_path))
    settings = Settings(_env_file=None)

    assert settings.log_path == tmp_path / "trailcam_logs" / "trailcam_history.log"


def test_get_env_prefers_runtime_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRAILCAM_SD_CAPACITY", "2000")
    monkeypatch.setenv("TRAILCAM_LOG_TO_CONSOLE", "yes")

    assert get_env("TRAILCAM_SD_CAPACITY") == 2000
    assert get_env("TRAILCAM_LOG_TO_CONSOLE") is True


def test_get_env_falls_back_to_settings_then_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TRAILCAM_RECORD_KEY", raising=False)
    monkeypatch.delenv("TRAILCAM_NOT_A_SETTING", raising=False)

    assert isinstance(get_env("TRAILCAM_RECORD_KEY"), str)
    assert get_env("TRAILCAM_NOT_A_SETTING", default="fallback") == "fallback"
    assert get_env("TRAILCAM_NOT_A_SETTING", default="7", parser=int) == "7"
    monkeypatch.setenv("TRAILCAM_NOT_A_SETTING", "7")
    assert get_env("TRAILCAM_NOT_A_SETTING", parser=int) == 7


def test_settings_fields_are_the_ones_the_simulator_reads() -> None:
    assert set(Settings.model_fields) == {
        "TRAILCAM_STATE_PATH",
        "TRAILCAM_RECORD_KEY",
        "TRAILCAM_TICK_SECONDS",
        "TRAILCAM_APPLICABILITY_POLICY",
        "TRAILCAM_SD_CAPACITY",
        "TRAILCAM_SD_USED",
        "TRAILCAM_LOG_LEVEL",
        "TRAILCAM_LOG_TO_CONSOLE",
        "TRAILCAM_LOG_DIR",
    }
