"""Tests for the memosync CLI."""

import json
import subprocess
import sys

import pytest

CONFIG = """
[sync]
enabled = true
scan_days = 0

[source]
folder = "WuCai"

[target]
folder = "Thino"
"""


def run_cli(*args, cwd):
    return subprocess.run(
        [sys.executable, "-m", "memosync.cli", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
    )


@pytest.fixture
def configured_vault(vault):
    (vault / "memosync.toml").write_text(CONFIG)
    return vault


def test_version_flag(tmp_path):
    result = run_cli("--version", cwd=tmp_path)

    assert result.returncode == 0
    assert "memosync" in result.stdout
    assert "python" in result.stdout
    assert "platform" in result.stdout


def test_sync_status_and_rerun(configured_vault, tmp_path):
    result = run_cli("--vault", str(configured_vault), "sync", cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    assert "Created: 3" in result.stdout
    assert len(list((configured_vault / "Thino").glob("*.md"))) == 3
    assert (configured_vault / ".memosync" / "state.json").exists()

    status = run_cli("--vault", str(configured_vault), "--json", "status", cwd=tmp_path)
    data = json.loads(status.stdout)
    assert data["total_processed"] == 3
    assert data["indexed_entries"] == 3

    again = run_cli("--vault", str(configured_vault), "--json", "sync", cwd=tmp_path)
    data = json.loads(again.stdout)
    assert data["created"] == 0
    assert data["skipped"] == 3


def test_reset_requires_confirm(configured_vault, tmp_path):
    run_cli("--vault", str(configured_vault), "sync", cwd=tmp_path)

    refused = run_cli("--vault", str(configured_vault), "reset", cwd=tmp_path)
    assert refused.returncode == 1

    done = run_cli("--vault", str(configured_vault), "reset", "--confirm", cwd=tmp_path)
    assert done.returncode == 0

    state = json.loads((configured_vault / ".memosync" / "state.json").read_text())
    assert state["processedEntries"] == {}
    assert state["syncCursor"]["totalEntriesProcessed"] == 0
    assert len(list((configured_vault / "Thino").glob("*.md"))) == 3


def test_disabled_sync_exits_nonzero(vault, tmp_path):
    result = run_cli("--vault", str(vault), "sync", cwd=tmp_path)

    assert result.returncode == 1
    assert "Sync is disabled" in result.stderr
    assert not (vault / "Thino").exists()


def test_parse_command(configured_vault, tmp_path):
    source = configured_vault / "WuCai" / "Daily Note 2024-03-05-20240305.md"

    result = run_cli("--vault", str(configured_vault), "--json", "parse", str(source), cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    entries = json.loads(result.stdout)
    assert [e["timestamp"] for e in entries] == ["2024-03-05T08:15:00", "2024-03-05T12:30:00"]
    assert all(len(e["id"]) == 16 and e["valid"] for e in entries)
    assert not (configured_vault / "Thino").exists()


def test_bad_config_reports_error(vault, tmp_path):
    (vault / "memosync.toml").write_text('[sync]\nmode = "sometimes"\n')

    result = run_cli("--vault", str(vault), "status", cwd=tmp_path)

    assert result.returncode == 1
    assert "sync.mode" in result.stderr
