"""
Tests for the JSON store file helpers and JsonRecordStore.

Tests cover:
- Stable pretty-printed serialization (write_all(read_all()) is a no-op)
- Missing / invalid / non-array files raise MalformedStore
- The {"rpmBlocks": [...]} envelope is unwrapped on read
- Lock file lifecycle, stale lock breaking, timeout
- NaN / Infinity never reach disk
"""

import json
import os
import threading
import time

import pytest

from rpm_life.store.errors import MalformedStore, StoreLockTimeout
from rpm_life.store.records import JsonRecordStore
from rpm_life.utils import persistence


class TestSaveLoad:
    def test_save_is_pretty_printed_with_trailing_newline(self, tmp_path):
        p = tmp_path / "categories.json"
        persistence.save_json(p, [{"id": "a", "name": "Santé"}])
        text = p.read_text(encoding="utf-8")
        assert text == '[\n  {\n    "id": "a",\n    "name": "Santé"\n  }\n]\n'

    def test_save_creates_parent_dirs_and_leaves_no_tmp(self, tmp_path):
        p = tmp_path / "nested" / "dir" / "store.json"
        persistence.save_json(p, [])
        assert p.read_text() == "[]\n"
        assert not (p.parent / "store.json.tmp").exists()

    def test_load_missing_file_is_malformed(self, tmp_path):
        with pytest.raises(MalformedStore) as exc:
            persistence.load_json(tmp_path / "nope.json")
        assert "does not exist" in exc.value.reason

    def test_load_invalid_json_is_malformed(self, tmp_path):
        p = tmp_path / "bad.json"
        p.write_text("[{", encoding="utf-8")
        with pytest.raises(MalformedStore) as exc:
            persistence.load_json(p)
        assert exc.value.path == str(p)


class TestJsonRecordStore:
    def test_round_trip_is_byte_stable(self, tmp_path):
        p = tmp_path / "rpmBlocks.json"
        rows = [
            {"id": "1", "result": "Run a marathon", "massiveActions": [{"id": "m1", "key": "✔"}]},
            {"id": "2", "purposes": ["a", "b"], "saved": True, "n": 1.5},
        ]
        store = JsonRecordStore(p)
        store.write_all(rows)
        before = p.read_bytes()
        store.write_all(store.read_all())
        assert p.read_bytes() == before
        assert store.read_all() == rows

    def test_hand_written_file_is_normalized_once_then_stable(self, tmp_path):
        p = tmp_path / "categories.json"
        p.write_text('[{"id":"x","name":"Health"}]', encoding="utf-8")
        store = JsonRecordStore(p)
        store.write_all(store.read_all())
        first = p.read_bytes()
        store.write_all(store.read_all())
        assert p.read_bytes() == first

    def test_non_array_is_malformed(self, tmp_path):
        p = tmp_path / "categories.json"
        p.write_text('{"id": "x"}', encoding="utf-8")
        with pytest.raises(MalformedStore):
            JsonRecordStore(p).read_all()

    def test_envelope_is_unwrapped(self, tmp_path):
        p = tmp_path / "rpmBlocks.json"
        p.write_text(json.dumps({"rpmBlocks": [{"id": "b1"}]}), encoding="utf-8")
        store = JsonRecordStore(p, envelope="rpmBlocks")
        assert store.read_all() == [{"id": "b1"}]

    def test_envelope_rewritten_as_plain_array(self, tmp_path):
        p = tmp_path / "rpmBlocks.json"
        p.write_text(json.dumps({"rpmBlocks": [{"id": "b1"}]}), encoding="utf-8")
        store = JsonRecordStore(p, envelope="rpmBlocks")
        store.write_all(store.read_all())
        assert json.loads(p.read_text(encoding="utf-8")) == [{"id": "b1"}]

    def test_envelope_ignored_when_not_configured(self, tmp_path):
        p = tmp_path / "categories.json"
        p.write_text(json.dumps({"rpmBlocks": []}), encoding="utf-8")
        with pytest.raises(MalformedStore):
            JsonRecordStore(p).read_all()

    def test_ensure_creates_once(self, tmp_path):
        p = tmp_path / "calendar-events.json"
        store = JsonRecordStore(p)
        assert store.ensure() is True
        assert store.read_all() == []
        store.write_all([{"id": "e1"}])
        assert store.ensure() is False
        assert store.read_all() == [{"id": "e1"}]


class TestLocking:
    def test_lock_file_exists_only_while_held(self, tmp_path):
        p = tmp_path / "categories.json"
        lock_file = tmp_path / "categories.json.lock"
        with persistence.locked(p):
            assert lock_file.exists()
            assert lock_file.read_text().strip() == str(os.getpid())
        assert not lock_file.exists()

    def test_lock_released_on_exception(self, tmp_path):
        p = tmp_path / "categories.json"
        with pytest.raises(RuntimeError):
            with persistence.locked(p):
                raise RuntimeError("boom")
        assert not (tmp_path / "categories.json.lock").exists()

    def test_fresh_foreign_lock_times_out(self, tmp_path):
        p = tmp_path / "categories.json"
        (tmp_path / "categories.json.lock").write_text("99999")
        with pytest.raises(StoreLockTimeout):
            with persistence.locked(p, timeout=0.2):
                pass

    def test_stale_lock_is_broken(self, tmp_path):
        p = tmp_path / "categories.json"
        lock_file = tmp_path / "categories.json.lock"
        lock_file.write_text("99999")
        old = time.time() - 60
        os.utime(lock_file, (old, old))
        with persistence.locked(p, timeout=0.2):
            assert lock_file.read_text().strip() == str(os.getpid())
        assert not lock_file.exists()

    def test_stale_break_leaves_a_lock_someone_else_just_took(self, tmp_path):
        lock_file = tmp_path / "categories.json.lock"
        lock_file.write_text("99999")
        old = time.time() - 60
        os.utime(lock_file, (old, old))
        seen = lock_file.stat()

        # Another writer broke the stale lock and took a fresh one meanwhile
        lock_file.unlink()
        lock_file.write_text("12345")

        persistence._break_stale(lock_file, seen)
        assert lock_file.read_text() == "12345"
        assert [p.name for p in tmp_path.iterdir()] == ["categories.json.lock"]

    def test_thread_and_file_waits_share_one_timeout(self, tmp_path):
        p = tmp_path / "categories.json"
        (tmp_path / "categories.json.lock").write_text("99999")
        tlock = persistence._thread_lock(p)
        tlock.acquire()
        releaser = threading.Timer(0.3, tlock.release)
        releaser.start()

        start = time.monotonic()
        with pytest.raises(StoreLockTimeout):
            with persistence.locked(p, timeout=0.4):
                pass
        elapsed = time.monotonic() - start
        releaser.join()
        assert elapsed < 0.6


class TestNonFinite:
    @pytest.mark.parametrize("bad", [float("inf"), float("nan")])
    def test_dumps_refuses_non_finite(self, bad):
        with pytest.raises(ValueError):
            persistence.dumps([{"durationAmount": bad}])

    def test_failed_save_keeps_previous_contents(self, tmp_path):
        p = tmp_path / "rpmBlocks.json"
        persistence.save_json(p, [{"id": "b1"}])
        with pytest.raises(ValueError):
            persistence.save_json(p, [{"id": "b1", "n": float("inf")}])
        assert json.loads(p.read_text(encoding="utf-8")) == [{"id": "b1"}]
        assert not (tmp_path / "rpmBlocks.json.tmp").exists()
