import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from trailcam_sim import logging_setup  # noqa: E402
from trailcam_sim.domain.record import ConfigurationRecord, default_record  # noqa: E402
from tests.memory_gateway import InMemorySettingsGateway  # noqa: E402


@pytest.fixture(autouse=True)
def _history_log(tmp_path, monkeypatch):
    """Send the history log to a per-test file and keep the console quiet."""
    monkeypatch.setenv("TRAILCAM_LOG_TO_CONSOLE", "false")
    log_path = tmp_path / "logs" / "trailcam_history.log"
    logging_setup.configure_logging(log_path=log_path, level="DEBUG", force=True)
    try:
        yield log_path
    finally:
        logging_setup.reset_logging()


@pytest.fixture()
def default() -> ConfigurationRecord:
    return default_record()


@pytest.fixture()
def memory_gateway() -> InMemorySettingsGateway:
    return InMemorySettingsGateway()
