"""Tests for source file discovery."""

import logging
from datetime import date

from memosync.discovery import cutoff_date, find_source_files, parse_date_from_filename


def test_finds_files_recursively_sorted(storage):
    files = find_source_files(storage, "WuCai")

    assert files == [
        "WuCai/2024/Daily Note 2024-03-06-20240306.md",
        "WuCai/Daily Note 2024-03-05-20240305.md",
    ]


def test_filters_by_prefix_marker_and_extension(add_note, storage):
    add_note("WuCai/Meeting 2024-03-05.md", "## Daily note\n")
    add_note("WuCai/Daily Note no marker.md", "# nothing here\n")
    add_note("WuCai/Daily Note 2024-03-07.txt", "## Daily note\n")

    files = find_source_files(storage, "WuCai")

    assert len(files) == 2
    assert all(f.endswith(".md") and "/Daily Note 2024-03-0" in f for f in files)


def test_missing_folder_is_empty_with_warning(storage, caplog):
    with caplog.at_level(logging.WARNING, logger="memosync.discovery"):
        files = find_source_files(storage, "Nope")

    assert files == []
    assert any("not found" in r.getMessage() for r in caplog.records)


def test_scan_window_skips_old_files(add_note, storage):
    add_note("WuCai/Daily Note 2024-03-08-20240308.md", "## Daily note\n")
    add_note("WuCai/Daily Note undated.md", "## Daily note\n")

    files = find_source_files(storage, "WuCai", scan_days=3, today=date(2024, 3, 10))

    assert files == [
        "WuCai/Daily Note 2024-03-08-20240308.md",
        "WuCai/Daily Note undated.md",
    ]


def test_scan_days_zero_disables_cutoff(storage):
    files = find_source_files(storage, "WuCai", scan_days=0, today=date(2030, 1, 1))
    assert len(files) == 2


def test_cutoff_date():
    assert cutoff_date(0) is None
    assert cutoff_date(7, today=date(2024, 3, 10)) == date(2024, 3, 3)


def test_parse_date_from_filename():
    assert parse_date_from_filename("Daily Note 2024-03-05-20240305.md") == date(2024, 3, 5)
    assert parse_date_from_filename("Daily Note 2024-02-30.md") is None
    assert parse_date_from_filename("Other 2024-03-05.md") is None
    assert parse_date_from_filename("Journal 2024-03-05.md", prefix="Journal") == date(2024, 3, 5)


def test_undecodable_file_is_skipped_with_warning(vault, storage, caplog):
    bad = vault / "WuCai" / "Daily Note 2024-03-07-20240307.md"
    bad.write_bytes(b"## Daily note\n- 2024-03-07 09:00\n\t\xff\xfe broken\n")

    with caplog.at_level(logging.WARNING, logger="memosync.discovery"):
        files = find_source_files(storage, "WuCai")

    assert files == [
        "WuCai/2024/Daily Note 2024-03-06-20240306.md",
        "WuCai/Daily Note 2024-03-05-20240305.md",
    ]
    assert any("Could not read" in r.getMessage() for r in caplog.records)
