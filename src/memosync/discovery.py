"""Find daily note source files in a storage tree."""

import re
from datetime import date, datetime, timedelta

from .core.model import FileNode
from .core.ports import Storage
from .errors import StorageError
from .log import get_logger
from .parser import DEFAULT_SECTION_MARKER

logger = get_logger(__name__)

DEFAULT_PREFIX = "Daily Note"


def cutoff_date(scan_days: int, today: date | None = None) -> date | None:
    """First day inside the scan window, or None when the window is disabled."""
    if scan_days <= 0:
        return None
    today = today or datetime.now().date()
    return today - timedelta(days=scan_days)


def parse_date_from_filename(name: str, prefix: str = DEFAULT_PREFIX) -> date | None:
    """
    Date embedded in a source filename.

    Names look like `Daily Note 2024-03-05-20240305.md`; only the first
    `YYYY-MM-DD` after the prefix counts.
    """
    m = re.search(re.escape(prefix) + r" (\d{4})-(\d{2})-(\d{2})", name)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def is_source_file(
    storage: Storage,
    node: FileNode,
    prefix: str = DEFAULT_PREFIX,
    section_marker: str = DEFAULT_SECTION_MARKER,
) -> bool:
    """Markdown file with the expected name prefix that contains the section marker."""
    if node.is_folder or node.extension != "md" or not node.name.startswith(prefix):
        return False
    try:
        return section_marker in storage.read_text(node.path)
    except (OSError, UnicodeDecodeError, StorageError) as e:
        logger.warning("Could not read %s: %s", node.path, e)
        return False


def find_source_files(
    storage: Storage,
    folder: str,
    prefix: str = DEFAULT_PREFIX,
    section_marker: str = DEFAULT_SECTION_MARKER,
    scan_days: int = 0,
    today: date | None = None,
) -> list[str]:
    """
    Recursively collect source file paths under ``folder``.

    Args:
        storage: Storage to walk
        folder: Vault-relative folder to scan
        prefix: Required filename prefix
        section_marker: Text the file must contain
        scan_days: Skip files dated before today minus this many days (0 = no cutoff)
        today: Reference day for the cutoff (defaults to the local date)

    Returns:
        Matching paths sorted for deterministic processing order
    """
    if not storage.is_folder(folder):
        logger.warning("Source folder not found: %s", folder)
        return []

    cutoff = cutoff_date(scan_days, today)
    found: list[str] = []
    pending = [folder]

    while pending:
        for node in storage.list_children(pending.pop()):
            if node.is_folder:
                pending.append(node.path)
                continue
            if not is_source_file(storage, node, prefix, section_marker):
                continue
            if cutoff is not None:
                file_date = parse_date_from_filename(node.name, prefix)
                if file_date is not None and file_date < cutoff:
                    logger.debug("Skipping old file: %s (before %s)", node.name, cutoff)
                    continue
            found.append(node.path)

    return sorted(found)
