"""Tests for sync state persistence."""

import json

from memosync.adapters.json_state import JsonStateStore, MemoryStateStore
from memosync.core.model import DedupRecord, SyncCursor, SyncState


def sample_state():
    return SyncState(
        processed_entries={
            "2024-03-05T08:15:00_1a2b3c4d": DedupRecord(
                content_hash="1a2b3c4d",
                target_filename="Thino/20240305-0123456789abcdef.md",
                processed_at="2024-03-10T12:00:00+00:00",
            )
        },
        cursor=SyncCursor(
            last_processed_file="WuCai/Daily Note 2024-03-05.md",
            last_processed_timestamp="2024-03-05T08:15:00",
            total_entries_processed=1,
            last_sync_time="2024-03-10T12:00:00+00:00",
            failed_entries=0,
            skipped_entries=2,
        ),
    )


def test_missing_file_loads_fresh_state(tmp_path):
    state = JsonStateStore(tmp_path / "state.json").load()

    assert state.processed_entries == {}
    assert state.cursor == SyncCursor()


def test_round_trip(tmp_path):
    store = JsonStateStore(tmp_path / ".memosync" / "state.json")

    store.save(sample_state())

    assert store.load() == sample_state()


def test_on_disk_shape(tmp_path):
    path = tmp_path / "state.json"
    JsonStateStore(path).save(sample_state())

    data = json.loads(path.read_text(encoding="utf-8"))

    assert set(data) == {"processedEntries", "syncCursor"}
    assert data["processedEntries"]["2024-03-05T08:15:00_1a2b3c4d"] == {
        "contentHash": "1a2b3c4d",
        "thinoFilename": "Thino/20240305-0123456789abcdef.md",
        "processedAt": "2024-03-10T12:00:00+00:00",
    }
    assert data["syncCursor"]["totalEntriesProcessed"] == 1
    assert data["syncCursor"]["lastProcessedTimestamp"] == "2024-03-05T08:15:00"


def test_unknown_keys_survive_round_trip(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps({"processedEntries": {}, "syncCursor": {}, "enableSync": True, "debugMode": False}),
        encoding="utf-8",
    )
    store = JsonStateStore(path)

    store.save(store.load())

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["enableSync"] is True
    assert data["debugMode"] is False


def test_copy_is_independent():
    state = sample_state()
    clone = state.copy()

    clone.processed_entries.clear()
    clone.cursor.total_entries_processed = 99

    assert len(state.processed_entries) == 1
    assert state.cursor.total_entries_processed == 1


def test_memory_store():
    store = MemoryStateStore()
    store.save(sample_state())

    assert store.load() == sample_state()
    assert store.saves == 1
