"""Shared test fixtures for sentinel-wipe tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from sentinel_wipe.core.config import Settings
from sentinel_wipe.core.models import CommandResult, Device, InputEvent
from sentinel_wipe.data.store import DataStore

SAMPLE_LISTING = (
    'NAME="sda" TYPE="disk" SIZE="465.8G" MODEL="Samsung SSD 860" '
    'SERIAL="S3Z9NB0K123456" ROTA="0"\n'
    'NAME="sda1" TYPE="part" SIZE="512M" MODEL="" SERIAL="" ROTA="0"\n'
    'NAME="nvme0n1" TYPE="disk" SIZE="953.9G" MODEL="WDC PC SN730" '
    'SERIAL="20123A800123" ROTA="0"\n'
    'NAME="nvme0n1p1" TYPE="part" SIZE="953.9G" MODEL="" SERIAL="" ROTA="0"\n'
    'NAME="loop0" TYPE="loop" SIZE="64M" MODEL="" SERIAL="" ROTA="0"\n'
)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with every log file under tmp_path."""
    return Settings(
        wipe_script="/opt/sentinel/scripts/wipe-device.sh",
        detect_script="/opt/sentinel/scripts/detect-android.sh",
        android_wipe_script="/opt/sentinel/scripts/android-wipe.sh",
        wipe_log=str(tmp_path / "wipe.log"),
        detect_log=str(tmp_path / "detect.log"),
        android_log=str(tmp_path / "android.log"),
        use_sudo=True,
        command_timeout=None,
    )


@pytest.fixture
def mock_runner() -> MagicMock:
    """CommandRunner stand-in returning SAMPLE_LISTING and clean exits."""
    runner = MagicMock()
    runner.list_block_devices.return_value = SAMPLE_LISTING
    runner.erase.return_value = CommandResult(
        success=True, exit_code=0, log_path="/tmp/sentinel-wipe.log"
    )
    runner.signature_report.return_value = ""
    runner.detect_android.return_value = CommandResult(
        success=True, stdout="Scanning...\nFound device ABC123\n",
        log_path="/tmp/sentinel-detect.log",
    )
    runner.wipe_android.return_value = CommandResult(
        success=True, exit_code=0, log_path="/tmp/sentinel-android.log"
    )
    return runner


@pytest.fixture
def temp_db(tmp_path):
    """DataStore with a temporary SQLite database."""
    db_path = str(tmp_path / "test.db")
    store = DataStore(db_path=db_path)
    yield store
    store.close()


class RecordingSink:
    """Presentation sink that keeps every view it was given."""

    def __init__(self):
        self.views: list = []

    def render(self, view) -> None:
        self.views.append(view)

    def of_type(self, cls) -> list:
        return [v for v in self.views if isinstance(v, cls)]


class ScriptedInput:
    """Input source replaying a fixed script; quits once it runs dry."""

    def __init__(self, events=None, lines=None):
        self.events = list(events or [])
        self.lines = list(lines or [])
        self.prompts: list[str] = []

    def next_event(self) -> InputEvent:
        if not self.events:
            return InputEvent.QUIT
        return self.events.pop(0)

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.lines.pop(0) if self.lines else ""


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


def make_device(
    name: str = "sda",
    model: str = "",
    serial: str = "",
    size: str = "1T",
    rotational: bool = False,
) -> Device:
    """Helper to create a Device with a /dev/ node."""
    return Device(
        name=name,
        node=f"/dev/{name}",
        model=model,
        serial=serial,
        size=size,
        rotational=rotational,
    )
