"""Turn parsed entries into memo notes with deterministic IDs."""

import hashlib
import re
from collections.abc import Iterable, Sequence
from datetime import datetime

from .adapters.yaml_codec import MemoCodec
from .core.model import BatchResult, ConversionFailure, ConvertedNote, Entry, MemoMeta
from .core.utils import (
    format_date_compact,
    format_memo_datetime,
    format_minute_key,
    normalize_content,
)
from .errors import ConversionError
from .log import get_logger

logger = get_logger(__name__)

ID_LENGTH = 16
CONTENT_HASH_LENGTH = 8
DEFAULT_FILENAME_FORMAT = "{date}-{id}.md"
DEFAULT_MEMO_TYPE = "JOURNAL"
DEFAULT_TAG = "wucai"

_HEX_ID = re.compile(rf"^[0-9a-f]{{{ID_LENGTH}}}$")
REQUIRED_META = ("id", "createdAt", "updatedAt", "thinoType")


def _sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def generate_id(timestamp: datetime, content: str) -> str:
    """
    Deterministic 16-hex-char ID for an entry.

    The timestamp is truncated to the minute so entries that differ only in
    seconds collapse onto the same ID.
    """
    hash_input = f"{format_minute_key(timestamp)}|{normalize_content(content)}"
    return _sha256_hex(hash_input)[:ID_LENGTH]


def content_hash(content: str) -> str:
    """8-hex-char fingerprint of the normalized content alone."""
    return _sha256_hex(normalize_content(content))[:CONTENT_HASH_LENGTH]


class NoteConverter:
    def __init__(
        self,
        filename_format: str = DEFAULT_FILENAME_FORMAT,
        memo_type: str = DEFAULT_MEMO_TYPE,
        tags: Iterable[str] = (DEFAULT_TAG,),
        codec: MemoCodec | None = None,
    ):
        self.filename_format = filename_format
        self.memo_type = memo_type
        self.tags = list(tags)
        self.codec = codec or MemoCodec()

    def filename_for(self, timestamp: datetime, note_id: str) -> str:
        return self.filename_format.replace("{date}", format_date_compact(timestamp)).replace(
            "{id}", note_id
        )

    def build_meta(self, note_id: str, timestamp: datetime) -> MemoMeta:
        # Notes are never edited after creation, so both stamps are equal
        stamp = format_memo_datetime(timestamp)
        return MemoMeta(
            id=note_id,
            created_at=stamp,
            updated_at=stamp,
            memo_type=self.memo_type,
            tags=list(self.tags),
        )

    def convert_entry(self, entry: Entry) -> ConvertedNote:
        if entry.is_empty:
            raise ConversionError("Cannot convert empty entry")

        body = normalize_content("\n".join(entry.content_lines))
        note_id = generate_id(entry.timestamp, body)

        return ConvertedNote(
            id=note_id,
            filename=self.filename_for(entry.timestamp, note_id),
            meta=self.build_meta(note_id, entry.timestamp),
            body=body,
            source_timestamp=entry.timestamp,
            source_entry=entry,
        )

    def batch_convert(self, entries: Sequence[Entry]) -> BatchResult:
        """
        Convert many entries; empty ones are skipped, failures are collected.
        """
        result = BatchResult()
        for entry in entries:
            if entry.is_empty:
                logger.debug("Skipping empty entry: %s", entry.timestamp.isoformat())
                continue
            try:
                result.successful.append(self.convert_entry(entry))
            except Exception as e:
                msg = f"Conversion failed: {e}"
                logger.warning("Entry %s: %s", entry.timestamp.isoformat(), msg)
                result.failed.append(ConversionFailure(entry=entry, error=msg))

        logger.debug(
            "Batch conversion complete: %d successful, %d failed",
            len(result.successful),
            len(result.failed),
        )
        return result

    def render(self, note: ConvertedNote) -> str:
        return self.codec.encode_file(note)


def validate_note(note: ConvertedNote) -> list[str]:
    """
    Check a converted note before it is written.

    Returns:
        List of problems; empty when the note is valid
    """
    problems = []
    if not _HEX_ID.match(note.id or ""):
        problems.append(f"id must be {ID_LENGTH} lowercase hex characters: {note.id!r}")
    if not note.filename or not note.filename.endswith(".md"):
        problems.append(f"filename must end in .md: {note.filename!r}")
    meta = note.meta.as_frontmatter()
    for key in REQUIRED_META:
        if not meta.get(key):
            problems.append(f"missing metadata field: {key}")
    if not note.body.strip():
        problems.append("body is empty")
    return problems


def convert_entry(entry: Entry) -> ConvertedNote:
    """Convert one entry with the default settings."""
    return NoteConverter().convert_entry(entry)


def batch_convert(entries: Sequence[Entry]) -> BatchResult:
    """Batch-convert with the default settings."""
    return NoteConverter().batch_convert(entries)
