"""Tests for sentinel_wipe.data.store — DataStore SQLite operations."""

from __future__ import annotations

import os

from sentinel_wipe.data.store import DataStore


# ── Config ────────────────────────────────────────────────────────────


class TestConfig:
    """get_config / set_config / unset_config."""

    def test_get_config_missing_key_returns_none(self, temp_db: DataStore):
        assert temp_db.get_config("wipe_script") is None

    def test_set_config_creates_new_key(self, temp_db: DataStore):
        temp_db.set_config("wipe_script", "/srv/wipe.sh")
        assert temp_db.get_config("wipe_script") == "/srv/wipe.sh"

    def test_set_config_overwrites_existing(self, temp_db: DataStore):
        temp_db.set_config("use_sudo", "true")
        temp_db.set_config("use_sudo", "false")
        assert temp_db.get_config("use_sudo") == "false"

    def test_unset_config(self, temp_db: DataStore):
        temp_db.set_config("command_timeout", "60.0")
        temp_db.unset_config("command_timeout")
        assert temp_db.get_config("command_timeout") is None

    def test_unset_missing_key_is_noop(self, temp_db: DataStore):
        temp_db.unset_config("never_set")
        assert temp_db.get_config("never_set") is None


# ── Wipe journal ──────────────────────────────────────────────────────


class TestWipeJournal:
    """record_wipe and get_wipe_history."""

    def _record(self, store: DataStore, target: str = "/dev/sda", **kwargs):
        fields = dict(
            target=target,
            target_kind="SSD",
            method="ata-secure-erase",
            verdict="removed",
            success=True,
            exit_code=0,
            log_path="/tmp/sentinel-wipe.log",
        )
        fields.update(kwargs)
        return store.record_wipe(**fields)

    def test_empty_history(self, temp_db: DataStore):
        assert temp_db.get_wipe_history() == []

    def test_record_returns_unique_ids(self, temp_db: DataStore):
        first = self._record(temp_db)
        second = self._record(temp_db)
        assert first != second

    def test_round_trip_fields(self, temp_db: DataStore):
        entry_id = self._record(temp_db)
        (entry,) = temp_db.get_wipe_history()
        assert entry["id"] == entry_id
        assert entry["target"] == "/dev/sda"
        assert entry["target_kind"] == "SSD"
        assert entry["method"] == "ata-secure-erase"
        assert entry["verdict"] == "removed"
        assert entry["success"] is True
        assert entry["exit_code"] == 0
        assert entry["log_path"] == "/tmp/sentinel-wipe.log"
        assert entry["created_at"]

    def test_failure_stored_as_false(self, temp_db: DataStore):
        self._record(temp_db, verdict="failed", success=False, exit_code=3)
        (entry,) = temp_db.get_wipe_history()
        assert entry["success"] is False
        assert entry["exit_code"] == 3

    def test_optional_fields(self, temp_db: DataStore):
        self._record(
            temp_db, target="ABC123", target_kind="android",
            method="fastboot", exit_code=None, log_path=None,
        )
        (entry,) = temp_db.get_wipe_history()
        assert entry["exit_code"] is None
        assert entry["log_path"] is None

    def test_newest_first(self, temp_db: DataStore):
        for node in ("/dev/sda", "/dev/sdb", "/dev/sdc"):
            self._record(temp_db, target=node)
        targets = [e["target"] for e in temp_db.get_wipe_history()]
        assert targets == ["/dev/sdc", "/dev/sdb", "/dev/sda"]

    def test_limit(self, temp_db: DataStore):
        for i in range(5):
            self._record(temp_db, target=f"/dev/loop{i}")
        history = temp_db.get_wipe_history(limit=2)
        assert [e["target"] for e in history] == ["/dev/loop4", "/dev/loop3"]


# ── Lifecycle ─────────────────────────────────────────────────────────


class TestLifecycle:
    def test_creates_parent_directory(self, tmp_path):
        db_path = str(tmp_path / "nested" / "dir" / "data.db")
        store = DataStore(db_path=db_path)
        try:
            assert os.path.exists(db_path)
        finally:
            store.close()

    def test_data_survives_reopen(self, tmp_path):
        db_path = str(tmp_path / "data.db")
        store = DataStore(db_path=db_path)
        store.set_config("wipe_log", "/var/log/wipe.log")
        store.record_wipe("/dev/sda", "SSD", "ata-secure-erase", "removed", True)
        store.close()

        reopened = DataStore(db_path=db_path)
        try:
            assert reopened.get_config("wipe_log") == "/var/log/wipe.log"
            assert len(reopened.get_wipe_history()) == 1
        finally:
            reopened.close()

    def test_close_is_idempotent(self, temp_db: DataStore):
        temp_db.close()
        temp_db.close()
