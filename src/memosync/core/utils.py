"""Utility functions for memosync."""

import re
from datetime import datetime

_LINE_BREAKS = re.compile(r"\r\n?")


def normalize_content(text: str) -> str:
    """
    Canonical form of entry content, used for hashing and emission.

    - Unify line endings (`\\r\\n` and `\\r` become `\\n`)
    - Trim each line
    - Drop lines that are empty after trimming
    - Re-join with single `\\n`

    Applying it twice gives the same result as applying it once.

    Examples:
        >>> normalize_content("  first \\r\\n\\r\\n second\\t")
        'first\\nsecond'
    """
    text = _LINE_BREAKS.sub("\n", text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def truncate_to_minute(ts: datetime) -> datetime:
    """Zero out seconds and microseconds."""
    return ts.replace(second=0, microsecond=0)


def format_minute_key(ts: datetime) -> str:
    """`YYYY-MM-DD HH:mm:00` of the timestamp truncated to the minute."""
    return truncate_to_minute(ts).strftime("%Y-%m-%d %H:%M:00")


def format_date_compact(ts: datetime) -> str:
    """`YYYYMMDD`, used in target filenames."""
    return ts.strftime("%Y%m%d")


def format_memo_datetime(ts: datetime) -> str:
    """`YYYY/MM/DD HH:mm:ss`, the target notes' createdAt/updatedAt format."""
    return ts.strftime("%Y/%m/%d %H:%M:%S")


def join_path(folder: str, name: str) -> str:
    """Join vault-relative POSIX path segments, tolerating an empty folder."""
    folder = folder.strip("/")
    return f"{folder}/{name}" if folder else name
