from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

NoteId = str


@dataclass
class Entry:
    timestamp: datetime  # minute precision, naive local time
    content_lines: list[str] = field(default_factory=list)
    source_line_numbers: list[int] = field(default_factory=list)  # diagnostics only
    source_file: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.content_lines or all(not line.strip() for line in self.content_lines)


@dataclass
class MemoMeta:
    id: NoteId
    created_at: str
    updated_at: str
    memo_type: str
    tags: list[str] = field(default_factory=list)

    def as_frontmatter(self) -> dict[str, Any]:
        # key names are the target app's on-disk format
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "thinoType": self.memo_type,
            "tags": list(self.tags),
        }


@dataclass
class ConvertedNote:
    id: NoteId
    filename: str
    meta: MemoMeta
    body: str
    source_timestamp: datetime
    source_entry: Entry | None = None


@dataclass
class ConversionFailure:
    entry: Entry
    error: str


@dataclass
class BatchResult:
    successful: list[ConvertedNote] = field(default_factory=list)
    failed: list[ConversionFailure] = field(default_factory=list)


@dataclass(frozen=True)
class DedupRecord:
    content_hash: str
    target_filename: str
    processed_at: str

    def to_dict(self) -> dict[str, str]:
        return {
            "contentHash": self.content_hash,
            "thinoFilename": self.target_filename,
            "processedAt": self.processed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DedupRecord":
        return cls(
            content_hash=data.get("contentHash", ""),
            target_filename=data.get("thinoFilename", ""),
            processed_at=data.get("processedAt", ""),
        )


@dataclass
class SyncCursor:
    last_processed_file: str = ""
    last_processed_timestamp: str | None = None
    total_entries_processed: int = 0
    last_sync_time: str | None = None
    failed_entries: int = 0
    skipped_entries: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "lastProcessedFile": self.last_processed_file,
            "lastProcessedTimestamp": self.last_processed_timestamp,
            "totalEntriesProcessed": self.total_entries_processed,
            "lastSyncTime": self.last_sync_time,
            "failedEntries": self.failed_entries,
            "skippedEntries": self.skipped_entries,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncCursor":
        return cls(
            last_processed_file=data.get("lastProcessedFile", ""),
            last_processed_timestamp=data.get("lastProcessedTimestamp"),
            total_entries_processed=data.get("totalEntriesProcessed", 0),
            last_sync_time=data.get("lastSyncTime"),
            failed_entries=data.get("failedEntries", 0),
            skipped_entries=data.get("skippedEntries", 0),
        )


@dataclass
class SyncState:
    """
    Persisted sync state: the dedup index plus the run cursor.

    ``to_dict``/``from_dict`` produce exactly the on-disk blob. Top-level keys
    this version does not know about are carried in ``extra`` so a load/save
    cycle never drops them.
    """

    processed_entries: dict[str, DedupRecord] = field(default_factory=dict)
    cursor: SyncCursor = field(default_factory=SyncCursor)
    extra: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> "SyncState":
        return SyncState(
            processed_entries=dict(self.processed_entries),
            cursor=SyncCursor(**vars(self.cursor)),
            extra=dict(self.extra),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        data["processedEntries"] = {
            key: record.to_dict() for key, record in self.processed_entries.items()
        }
        data["syncCursor"] = self.cursor.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncState":
        extra = {k: v for k, v in data.items() if k not in ("processedEntries", "syncCursor")}
        return cls(
            processed_entries={
                key: DedupRecord.from_dict(value)
                for key, value in (data.get("processedEntries") or {}).items()
            },
            cursor=SyncCursor.from_dict(data.get("syncCursor") or {}),
            extra=extra,
        )


@dataclass
class SyncResult:
    success: bool = True
    processed_entries: int = 0
    created_files: int = 0
    failed_entries: int = 0
    skipped_entries: int = 0
    error_message: str = ""
    created_notes: list[ConvertedNote] = field(default_factory=list)
    state: SyncState | None = None  # state after the run; the caller persists it

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "processed": self.processed_entries,
            "created": self.created_files,
            "failed": self.failed_entries,
            "skipped": self.skipped_entries,
            "error": self.error_message,
            "created_files": [note.filename for note in self.created_notes],
        }


@dataclass
class SyncStatus:
    total_processed: int
    last_sync_time: str | None
    failed_entries: int
    skipped_entries: int
    indexed_entries: int
    last_processed_file: str = ""
    last_processed_timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return dict(vars(self))


@dataclass(frozen=True)
class FileNode:
    path: str  # vault-relative, POSIX separators
    name: str
    is_folder: bool
    extension: str = ""
