import pytest
from rich.console import Console
from typer.testing import CliRunner

import trailcam_sim.cli.app as app_module
from trailcam_sim.application.session import DELETE_ALL_DONE, FIRMWARE_UP_TO_DATE
from trailcam_sim.cli.app import app, parse_cli_value
from trailcam_sim.config import settings
from trailcam_sim.domain.options import CameraMode, VideoLength
from trailcam_sim.domain.record import default_record
from trailcam_sim.infrastructure.mappers import RecordMapper
from trailcam_sim.infrastructure.settings_storage import JsonFileSettingsGateway


runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setattr(app_module, "console", Console(width=160))


@pytest.fixture()
def state_gateway(tmp_path, monkeypatch):
    gateway = JsonFileSettingsGateway(tmp_path / "state" / "settings.json")
    monkeypatch.setattr(app_module, "_build_gateway", lambda: gateway)
    return gateway


def _stored(gateway):
    return RecordMapper().from_document(gateway.load(settings.TRAILCAM_RECORD_KEY))


def test_set_persists_accepted_value(state_gateway):
    result = runner.invoke(app, ["set", "mode", "VIDEO"])

    assert result.exit_code == 0
    assert "mode set to VIDEO." in result.stdout
    assert _stored(state_gateway).mode is CameraMode.VIDEO


def test_set_rejects_out_of_domain_value(state_gateway):
    result = runner.invoke(app, ["set", "videoLength", "3min"])

    assert result.exit_code == 1
    assert "Rejected (InvalidEnumValue)" in result.stdout
    assert state_gateway.load(settings.TRAILCAM_RECORD_KEY) is None


def test_set_unknown_field(state_gateway):
    result = runner.invoke(app, ["set", "flashColour", "red"])

    assert result.exit_code == 1
    assert "UnknownField" in result.stdout


def test_set_boolean_from_words(state_gateway):
    result = runner.invoke(app, ["set", "hdrEnabled", "on"])

    assert result.exit_code == 0
    assert _stored(state_gateway).hdr_enabled is True


def test_show_hides_inapplicable_fields_unless_asked(state_gateway):
    runner.invoke(app, ["set", "mode", "VIDEO"])
    runner.invoke(app, ["set", "videoLength", "2min"])

    result = runner.invoke(app, ["show"])
    assert result.exit_code == 0
    assert "SD: 0123/1550" in result.stdout
    assert "1970/01/01 12:00 AM" in result.stdout
    assert "videoLength" in result.stdout
    assert "2min" in result.stdout
    assert "photoResolution" not in result.stdout

    everything = runner.invoke(app, ["show", "--all"])
    assert everything.exit_code == 0
    assert "photoResolution" in everything.stdout
    assert "(n/a)" in everything.stdout


def test_show_flags_motion_test(state_gateway):
    runner.invoke(app, ["set", "motionTestEnabled", "on"])

    result = runner.invoke(app, ["show"])

    assert "Motion detected!" in result.stdout


def test_set_time_accepts_leap_day(state_gateway):
    result = runner.invoke(app, ["set-time", "2024", "2", "29", "6", "5"])

    assert result.exit_code == 0
    assert "Time updated: 2024/02/29 6:05 AM" in result.stdout


def test_set_time_rejects_impossible_date(state_gateway):
    result = runner.invoke(app, ["set-time", "2024", "4", "31", "10", "0"])

    assert result.exit_code == 1
    assert "Rejected (InvalidDate)" in result.stdout


def test_set_time_rejects_huge_year(state_gateway):
    result = runner.invoke(app, ["set-time", str(10**20), "1", "1", "0", "0"])

    assert result.exit_code == 1
    assert "Rejected (InvalidDate)" in result.stdout
    assert state_gateway.load(settings.TRAILCAM_RECORD_KEY) is None


def test_reset_requires_confirmation(state_gateway):
    runner.invoke(app, ["set", "mode", "VIDEO"])

    declined = runner.invoke(app, ["reset"], input="n\n")
    assert declined.exit_code == 1
    assert _stored(state_gateway).mode is CameraMode.VIDEO

    confirmed = runner.invoke(app, ["reset"], input="y\n")
    assert confirmed.exit_code == 0
    assert "Settings restored to defaults." in confirmed.stdout
    assert _stored(state_gateway) == default_record()


def test_reset_with_yes_skips_prompt(state_gateway):
    runner.invoke(app, ["set", "videoLength", "1min"])

    result = runner.invoke(app, ["reset", "--yes"])

    assert result.exit_code == 0
    assert _stored(state_gateway).video_length is VideoLength.SEC_30


def test_options_lists_labels():
    result = runner.invoke(app, ["options", "videoLength"])

    assert result.exit_code == 0
    assert result.stdout.split() == ["5s", "10s", "20s", "30s", "1min", "2min"]


def test_options_for_toggle_and_bad_fields():
    toggle = runner.invoke(app, ["options", "hdrEnabled"])
    assert toggle.stdout.split() == ["ON", "OFF"]

    unknown = runner.invoke(app, ["options", "flashColour"])
    assert unknown.exit_code == 1
    assert "Unknown setting" in unknown.stdout

    read_only = runner.invoke(app, ["options", "currentDeviceTime"])
    assert read_only.exit_code == 1
    assert "cannot be changed directly" in read_only.stdout


def test_delete_all_and_firmware_upgrade(state_gateway):
    deleted = runner.invoke(app, ["delete-all", "--yes"])
    assert deleted.exit_code == 0
    assert DELETE_ALL_DONE in deleted.stdout
    assert "SD: 0000/1550" in deleted.stdout

    aborted = runner.invoke(app, ["delete-all"], input="n\n")
    assert aborted.exit_code == 1

    upgrade = runner.invoke(app, ["firmware-upgrade"])
    assert upgrade.exit_code == 0
    assert FIRMWARE_UP_TO_DATE in upgrade.stdout


def test_run_renders_dashboard_and_saves(state_gateway):
    runner.invoke(app, ["set", "mode", "VIDEO"])

    result = runner.invoke(app, ["run", "--seconds", "0"])

    assert result.exit_code == 0
    assert "videoLength" in result.stdout
    assert _stored(state_gateway).mode is CameraMode.VIDEO


@pytest.mark.parametrize(
    "field,raw,expected",
    [
        ("hdrEnabled", "ON", True),
        ("hdrEnabled", "off", False),
        ("smartIrVideoEnabled", "yes", True),
        ("hdrEnabled", "maybe", "maybe"),
        ("mode", "on", "on"),
        ("cameraName", "0", "0"),
    ],
)
def test_parse_cli_value(field, raw, expected):
    assert parse_cli_value(field, raw) == expected
