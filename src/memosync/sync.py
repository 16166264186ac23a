"""Sync orchestrator: discover, parse, convert, deduplicate, write."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Literal

from .converter import NoteConverter, content_hash, validate_note
from .core.model import ConvertedNote, DedupRecord, SyncResult, SyncState, SyncStatus
from .core.ports import Storage
from .core.utils import join_path
from .discovery import DEFAULT_PREFIX, find_source_files
from .log import get_logger
from .parser import DEFAULT_SECTION_MARKER, EntryParser

logger = get_logger(__name__)

WriteOutcome = Literal["created", "skipped", "failed"]


@dataclass
class SyncConfig:
    """Everything one sync run needs to know, passed in explicitly."""

    enabled: bool = False
    source_folder: str = ""
    target_folder: str = ""
    scan_days: int = 0
    source_prefix: str = DEFAULT_PREFIX
    section_marker: str = DEFAULT_SECTION_MARKER


def dedup_key(note: ConvertedNote, note_hash: str) -> str:
    return f"{note.source_timestamp.isoformat()}_{note_hash}"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _merge(total: SyncResult, part: SyncResult) -> None:
    total.processed_entries += part.processed_entries
    total.created_files += part.created_files
    total.failed_entries += part.failed_entries
    total.skipped_entries += part.skipped_entries
    total.created_notes.extend(part.created_notes)


class SyncService:
    """
    Runs the source-to-memo pipeline against a storage backend.

    The service holds no state between runs. ``sync_all`` takes the current
    ``SyncState`` and returns the updated one on the result; persisting it is
    the caller's job. Runs must not overlap.
    """

    def __init__(
        self,
        storage: Storage,
        config: SyncConfig,
        converter: NoteConverter | None = None,
        parser: EntryParser | None = None,
        clock: Callable[[], datetime] = _utc_now,
        today: Callable[[], date] | None = None,
    ):
        self.storage = storage
        self.config = config
        self.converter = converter or NoteConverter()
        self.parser = parser or EntryParser(config.section_marker)
        self.clock = clock
        self.today = today

    def sync_all(self, state: SyncState) -> SyncResult:
        result = SyncResult(state=state)

        if not self.config.enabled:
            result.success = False
            result.error_message = "Sync is disabled"
            return result
        if not self.config.source_folder or not self.config.target_folder:
            result.success = False
            result.error_message = "Source or target folder not configured"
            return result

        state = state.copy()
        result.state = state
        errors: list[str] = []
        last_file = ""

        try:
            self.ensure_folder(self.config.target_folder)

            files = find_source_files(
                self.storage,
                self.config.source_folder,
                prefix=self.config.source_prefix,
                section_marker=self.config.section_marker,
                scan_days=self.config.scan_days,
                today=self.today() if self.today else None,
            )
            logger.info(
                "Found %d source files (scan_days: %d)", len(files), self.config.scan_days
            )

            for path in files:
                file_result = self.sync_file(path, state)
                _merge(result, file_result)
                last_file = path
                if not file_result.success:
                    result.success = False
                    errors.append(file_result.error_message)
        except Exception as e:
            logger.error("Sync failed: %s", e, exc_info=True)
            result.success = False
            errors.append(f"Sync failed: {e}")

        result.error_message = "; ".join(errors)
        self._update_cursor(state, result, last_file)
        return result

    def sync_file(self, path: str, state: SyncState) -> SyncResult:
        """
        Parse, convert and write one source file. Records new index entries
        into ``state`` as files are created.
        """
        result = SyncResult(state=state)
        try:
            logger.debug("Processing file: %s", path)
            entries = self.parser.parse_file(self.storage, path)
            if not entries:
                logger.debug("No entries found in: %s", path)
                return result

            batch = self.converter.batch_convert(entries)
            result.failed_entries += len(batch.failed)

            for note in batch.successful:
                problems = validate_note(note)
                if problems:
                    logger.warning("Invalid note %s: %s", note.filename, "; ".join(problems))
                    result.failed_entries += 1
                    continue

                outcome = self.write_note(note, state)
                if outcome == "created":
                    result.created_files += 1
                    result.created_notes.append(note)
                elif outcome == "skipped":
                    result.skipped_entries += 1
                else:
                    result.failed_entries += 1
                result.processed_entries += 1
        except Exception as e:
            logger.error("Failed to sync file %s: %s", path, e)
            result.success = False
            result.error_message = f"Failed to process {path}: {e}"

        return result

    def write_note(self, note: ConvertedNote, state: SyncState) -> WriteOutcome:
        target_path = join_path(self.config.target_folder, note.filename)
        note_hash = content_hash(note.body)
        key = dedup_key(note, note_hash)

        try:
            record = state.processed_entries.get(key)
            if record is not None and self.storage.exists(record.target_filename):
                logger.debug("Already processed: %s", record.target_filename)
                return "skipped"

            if self.storage.exists(target_path):
                logger.debug("File already exists, skipping: %s", target_path)
                return "skipped"

            self.storage.create_file(target_path, self.converter.render(note))
        except Exception as e:
            logger.error("Failed to write %s: %s", target_path, e)
            return "failed"

        state.processed_entries[key] = DedupRecord(
            content_hash=note_hash,
            target_filename=target_path,
            processed_at=self.clock().isoformat(),
        )
        logger.debug("Created: %s", target_path)
        return "created"

    def ensure_folder(self, path: str) -> None:
        if not self.storage.exists(path):
            self.storage.create_folder(path)
            logger.info("Created folder: %s", path)

    def _update_cursor(self, state: SyncState, result: SyncResult, last_file: str) -> None:
        cursor = state.cursor
        cursor.total_entries_processed += result.created_files
        cursor.failed_entries += result.failed_entries
        cursor.skipped_entries += result.skipped_entries
        cursor.last_sync_time = self.clock().isoformat()
        if last_file:
            cursor.last_processed_file = last_file
        if result.created_notes:
            cursor.last_processed_timestamp = result.created_notes[-1].source_timestamp.isoformat()

    def reset_sync_state(self, state: SyncState | None = None) -> SyncState:
        """Empty index and zeroed cursor. Written memo files are left alone."""
        logger.info("Sync state reset")
        return SyncState(extra=dict(state.extra) if state else {})

    def get_sync_status(self, state: SyncState) -> SyncStatus:
        return get_sync_status(state)


def get_sync_status(state: SyncState) -> SyncStatus:
    cursor = state.cursor
    return SyncStatus(
        total_processed=cursor.total_entries_processed,
        last_sync_time=cursor.last_sync_time,
        failed_entries=cursor.failed_entries,
        skipped_entries=cursor.skipped_entries,
        indexed_entries=len(state.processed_entries),
        last_processed_file=cursor.last_processed_file,
        last_processed_timestamp=cursor.last_processed_timestamp,
    )
