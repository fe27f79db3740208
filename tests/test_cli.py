"""Tests for sentinel_wipe.cli — typer commands."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

import sentinel_wipe
from sentinel_wipe.cli import app
from sentinel_wipe.data.store import DataStore
from tests.conftest import SAMPLE_LISTING

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console():
    with patch("sentinel_wipe.cli.console", Console(width=200)):
        yield


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.db")


@pytest.fixture
def store_factory(db_path):
    """Route every DataStore() the CLI opens to a temporary database."""
    with patch(
        "sentinel_wipe.data.store.DataStore",
        side_effect=lambda db_path_=None: DataStore(db_path=db_path),
    ):
        yield


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------

def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"sentinel-wipe {sentinel_wipe.__version__}" in result.output


# ---------------------------------------------------------------------------
# list-disks
# ---------------------------------------------------------------------------

class TestListDisks:
    @patch("sentinel_wipe.cli._open_store", return_value=None)
    @patch("sentinel_wipe.core.commands.CommandRunner")
    def test_lists_disks(self, mock_runner_cls, _store):
        mock_runner_cls.return_value.list_block_devices.return_value = (
            SAMPLE_LISTING
        )
        result = runner.invoke(app, ["list-disks"])
        assert result.exit_code == 0
        assert "/dev/sda" in result.output
        assert "/dev/nvme0n1" in result.output
        assert "/dev/loop0" in result.output
        assert "/dev/sda1" not in result.output
        assert "ata-secure-erase" in result.output
        assert "nvme-format" in result.output
        assert "wipefs-zap" in result.output

    @patch("sentinel_wipe.cli._open_store", return_value=None)
    @patch("sentinel_wipe.core.commands.CommandRunner")
    def test_no_disks(self, mock_runner_cls, _store):
        mock_runner_cls.return_value.list_block_devices.return_value = ""
        result = runner.invoke(app, ["list-disks"])
        assert result.exit_code == 0
        assert "No disks detected." in result.output


# ---------------------------------------------------------------------------
# android-devices
# ---------------------------------------------------------------------------

class TestAndroidDevices:
    @patch("sentinel_wipe.cli._open_store", return_value=None)
    @patch("sentinel_wipe.core.commands.CommandRunner")
    def test_lists_adb_devices(self, mock_runner_cls, _store):
        mock_runner_cls.return_value.list_adb_devices.return_value = [
            "R58M12345 device usb:1-1 model:SM_G973F",
        ]
        result = runner.invoke(app, ["android-devices"])
        assert result.exit_code == 0
        assert "R58M12345" in result.output

    @patch("sentinel_wipe.cli._open_store", return_value=None)
    @patch("sentinel_wipe.core.commands.CommandRunner")
    def test_none_found(self, mock_runner_cls, _store):
        mock_runner_cls.return_value.list_adb_devices.return_value = []
        result = runner.invoke(app, ["android-devices"])
        assert result.exit_code == 0
        assert "No adb devices found." in result.output


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------

class TestHistory:
    def test_empty(self, db_path):
        with patch(
            "sentinel_wipe.cli._open_store",
            return_value=DataStore(db_path=db_path),
        ):
            result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "No wipes recorded." in result.output

    def test_shows_entries(self, db_path):
        seeded = DataStore(db_path=db_path)
        seeded.record_wipe(
            "/dev/sda", "SSD", "ata-secure-erase", "still-visible", True, 0,
            "/tmp/sentinel-wipe.log",
        )
        seeded.close()

        with patch(
            "sentinel_wipe.cli._open_store",
            return_value=DataStore(db_path=db_path),
        ):
            result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "/dev/sda" in result.output
        assert "still-visible" in result.output

    @patch("sentinel_wipe.cli._open_store", return_value=None)
    def test_store_unavailable(self, _store):
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 1
        assert "Local store unavailable." in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------

class TestConfig:
    def test_get_default(self, store_factory):
        result = runner.invoke(app, ["config", "get", "use_sudo"])
        assert result.exit_code == 0
        assert "use_sudo = true" in result.output

    def test_set_then_get(self, store_factory):
        result = runner.invoke(app, ["config", "set", "command_timeout", "45"])
        assert result.exit_code == 0
        assert "Set command_timeout = 45.0" in result.output

        result = runner.invoke(app, ["config", "get", "command_timeout"])
        assert "command_timeout = 45.0" in result.output

    def test_set_rejects_unknown_key(self, store_factory):
        result = runner.invoke(app, ["config", "set", "model", "gpt"])
        assert result.exit_code == 1
        assert "Unknown config key" in result.output

    def test_set_rejects_bad_value(self, store_factory):
        result = runner.invoke(app, ["config", "set", "use_sudo", "sometimes"])
        assert result.exit_code == 1

    def test_unset(self, store_factory):
        runner.invoke(app, ["config", "set", "wipe_log", "/var/log/w.log"])
        result = runner.invoke(app, ["config", "unset", "wipe_log"])
        assert result.exit_code == 0
        result = runner.invoke(app, ["config", "get", "wipe_log"])
        assert "wipe_log = /tmp/sentinel-wipe.log" in result.output

    def test_get_all(self, store_factory):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "wipe_script = /opt/sentinel/scripts/wipe-device.sh" in result.output
        assert "command_timeout = (not set)" in result.output

    def test_unknown_action(self, store_factory):
        result = runner.invoke(app, ["config", "drop"])
        assert result.exit_code == 1


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

class TestRun:
    @patch("sentinel_wipe.cli._open_store", return_value=None)
    @patch("sentinel_wipe.core.controller.SessionController")
    @patch("sentinel_wipe.core.commands.CommandRunner")
    def test_flags_reach_settings(self, mock_runner_cls, mock_ctrl_cls, _store):
        result = runner.invoke(app, [
            "run", "--wipe-script", "/srv/wipe.sh", "--no-sudo",
            "--timeout", "120",
        ])
        assert result.exit_code == 0
        settings = mock_runner_cls.call_args.args[0]
        assert settings.wipe_script == "/srv/wipe.sh"
        assert settings.use_sudo is False
        assert settings.command_timeout == 120.0
        mock_ctrl_cls.return_value.run.assert_called_once()

    @patch("sentinel_wipe.core.controller.SessionController")
    @patch("sentinel_wipe.core.commands.CommandRunner")
    def test_store_closed_after_run(self, mock_runner_cls, mock_ctrl_cls):
        store = MagicMock()
        store.get_config.return_value = None
        with patch("sentinel_wipe.cli._open_store", return_value=store):
            result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        store.close.assert_called_once()
        assert mock_ctrl_cls.call_args.kwargs["store"] is store
