"""Extract timestamped journal entries from daily note files."""

import re
from datetime import datetime

from .core.model import Entry
from .core.ports import Storage
from .errors import EntryParseError
from .log import get_logger

logger = get_logger(__name__)

DEFAULT_SECTION_MARKER = "## Daily note"

# "- 2024-03-05 08:15", matched against the stripped line
TIMESTAMP_RE = re.compile(r"^- (\d{4}-\d{2}-\d{2} \d{2}:\d{2})$")

# Content lines are indented with a tab or four spaces; exactly one is stripped
CONTENT_INDENTS = ("\t", "    ")


def parse_timestamp(value: str) -> datetime:
    """Parse `YYYY-MM-DD HH:mm` into a naive datetime."""
    try:
        return datetime.strptime(value, "%Y-%m-%d %H:%M")
    except ValueError as e:
        raise EntryParseError(f"Invalid timestamp '{value}': {e}") from e


def _strip_indent(line: str) -> str | None:
    for indent in CONTENT_INDENTS:
        if line.startswith(indent):
            return line[len(indent):]
    return None


class EntryParser:
    """
    Line classifier for the daily note section.

    Only three line shapes matter inside the section: timestamp lines open an
    entry, indented lines add content to the open entry, and a `##` heading
    ends the section. Everything else is ignored.
    """

    def __init__(self, section_marker: str = DEFAULT_SECTION_MARKER):
        self.section_marker = section_marker

    def find_section(self, lines: list[str]) -> int:
        for i, line in enumerate(lines):
            if line.strip() == self.section_marker:
                return i
        return -1

    def parse_text(self, text: str, source_file: str = "") -> list[Entry]:
        lines = text.split("\n")
        start = self.find_section(lines)
        if start == -1:
            logger.debug("No '%s' section in %s", self.section_marker, source_file)
            return []

        entries: list[Entry] = []
        current: Entry | None = None

        for i in range(start + 1, len(lines)):
            line = lines[i].rstrip()
            stripped = line.strip()

            m = TIMESTAMP_RE.match(stripped)
            if m:
                if current is not None and not current.is_empty:
                    entries.append(current)
                try:
                    current = Entry(
                        timestamp=parse_timestamp(m.group(1)),
                        source_line_numbers=[i],
                        source_file=source_file,
                    )
                except EntryParseError as e:
                    logger.warning("%s:%d: %s, entry discarded", source_file, i + 1, e)
                    current = None
                continue

            content = _strip_indent(line) if current is not None else None
            if content is not None:
                if content.strip():
                    current.content_lines.append(content)
                    current.source_line_numbers.append(i)
            elif not stripped:
                continue
            elif stripped.startswith("##"):
                break

        if current is not None and not current.is_empty:
            entries.append(current)

        logger.debug("Parsed %d entries from %s", len(entries), source_file)
        return entries

    def parse_file(self, storage: Storage, path: str) -> list[Entry]:
        return self.parse_text(storage.read_text(path), source_file=path)


def parse_entries(
    text: str, source_file: str = "", section_marker: str = DEFAULT_SECTION_MARKER
) -> list[Entry]:
    """Parse daily note text with a throwaway parser."""
    return EntryParser(section_marker).parse_text(text, source_file)
