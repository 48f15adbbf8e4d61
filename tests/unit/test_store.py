"""
Unit tests for src/cashtags/store/json_store.py

Tests verify:
- Missing store reads as empty
- Corrupt store reads as empty, is reported, and is copied aside
- Malformed entries in a valid store are skipped
- Writes are pretty-printed, field-ordered and atomic
- Write failures raise StoreWriteError and leave the old file intact
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from src.cashtags.errors import StoreWriteError
from src.cashtags.records import Record
from src.cashtags.store import JsonRecordStore, StoreStatus


class TestRead:
    """Test reading the store"""

    def test_missing_file_is_empty(self, store):
        """Test first run without a store file"""
        result = store.read()

        assert result.status == StoreStatus.MISSING
        assert result.records == []

    def test_reads_records_in_order(self, store, store_path):
        """Test a valid store is loaded with timestamps"""
        store_path.write_text(json.dumps([
            {"cashtag": "$FOO", "contract_address": "0xAAA", "timestamp": "T1"},
            {"cashtag": "unknown_cashtag", "contract_address": None, "timestamp": "T2"},
        ]))

        result = store.read()

        assert result.status == StoreStatus.LOADED
        assert result.records == [
            Record("$FOO", "0xAAA", "T1"),
            Record("unknown_cashtag", None, "T2"),
        ]

    def test_corrupt_json_is_empty_and_quarantined(self, store, store_path):
        """Test unreadable JSON is treated as empty but kept on disk"""
        store_path.write_text("[{not json")

        result = store.read()

        assert result.status == StoreStatus.CORRUPT
        assert result.records == []
        assert result.error
        assert result.quarantined_to is not None
        assert result.quarantined_to.read_text() == "[{not json"
        assert store_path.read_text() == "[{not json"

    def test_non_list_root_is_corrupt(self, store, store_path):
        """Test a JSON object at the root is treated as corrupt"""
        store_path.write_text('{"cashtag": "$FOO"}')

        result = store.read()

        assert result.status == StoreStatus.CORRUPT
        assert "array" in result.error

    def test_malformed_entries_skipped(self, store, store_path):
        """Test bad entries are dropped, good ones kept"""
        store_path.write_text(json.dumps([
            {"cashtag": "$FOO", "contract_address": "0xAAA", "timestamp": "T1"},
            "junk",
            {"cashtag": "$BAR"},
        ]))

        result = store.read()

        assert result.status == StoreStatus.LOADED
        assert result.records == [Record("$FOO", "0xAAA", "T1")]

    def test_quarantine_failure_still_returns_empty(self, store, store_path):
        """Test a failed copy does not stop the read"""
        store_path.write_text("nope")

        with patch("src.cashtags.store.json_store.shutil.copy2", side_effect=OSError("disk full")):
            result = store.read()

        assert result.status == StoreStatus.CORRUPT
        assert result.quarantined_to is None


class TestWrite:
    """Test writing the store"""

    def test_round_trip(self, store):
        """Test written records read back identically"""
        records = [Record("$FOO", "0xAAA", "T1"), Record("$BAR", None, "T2")]

        store.write(records)

        assert store.read().records == records

    def test_pretty_printed_with_field_order(self, store, store_path):
        """Test the file is indented and keys are in persisted order"""
        store.write([Record("$FOO", "0xAAA", "10/16/2026, 12:00:00")])

        text = store_path.read_text()

        assert text == (
            "[\n"
            "  {\n"
            '    "cashtag": "$FOO",\n'
            '    "contract_address": "0xAAA",\n'
            '    "timestamp": "10/16/2026, 12:00:00"\n'
            "  }\n"
            "]\n"
        )

    def test_non_ascii_preserved(self, store, store_path):
        """Test unicode cashtags are written verbatim"""
        store.write([Record("$ЖУК", None, "T1")])

        assert "$ЖУК" in store_path.read_text(encoding="utf-8")

    def test_creates_parent_directory(self, tmp_path):
        """Test the store directory is created on first write"""
        store = JsonRecordStore(tmp_path / "nested" / "dir" / "store.json")

        store.write([Record("$FOO", "0xAAA", "T1")])

        assert store.path.exists()

    def test_no_temp_files_left_behind(self, store, store_path):
        """Test a successful write leaves only the store file"""
        store.write([Record("$FOO", "0xAAA", "T1")])

        assert sorted(p.name for p in store_path.parent.iterdir()) == [store_path.name]

    def test_failed_replace_keeps_old_store(self, store, store_path):
        """Test a failing replace raises and leaves the previous file untouched"""
        store.write([Record("$OLD", "0x1", "T0")])
        before = store_path.read_text()

        with patch("src.cashtags.store.json_store.os.replace", side_effect=OSError("read-only")):
            with pytest.raises(StoreWriteError):
                store.write([Record("$OLD", "0x1", "T0"), Record("$NEW", "0x2", "T1")])

        assert store_path.read_text() == before
        assert sorted(p.name for p in store_path.parent.iterdir()) == [store_path.name]

    def test_unwritable_directory_raises(self, tmp_path):
        """Test an OSError while creating the directory is surfaced"""
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = JsonRecordStore(blocker / "store.json")

        with pytest.raises(StoreWriteError):
            store.write([Record("$FOO", "0xAAA", "T1")])

    def test_accepts_string_path(self, tmp_path):
        """Test the store accepts str paths"""
        store = JsonRecordStore(str(tmp_path / "s.json"))

        assert isinstance(store.path, Path)
        store.write([])
        assert json.loads(store.path.read_text()) == []
