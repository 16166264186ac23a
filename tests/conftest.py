"""Shared fixtures: a vault on disk with daily notes in it."""

from pathlib import Path

import pytest

from memosync.adapters.fs_storage import FsStorage
from memosync.sync import SyncConfig

DAILY_NOTE = """# Daily Note 2024-03-05

Some intro text.

## Daily note
- 2024-03-05 08:15
\tFelt productive today.
- 2024-03-05 12:30
\tLunch with the team.
\tTalked about the roadmap.

## Highlights
- 2024-03-05 20:00
\tThis is outside the section.
"""

SECOND_NOTE = """## Daily note
- 2024-03-06 07:00
    Morning run, 5k.
"""


def write_note(vault: Path, rel: str, text: str) -> Path:
    path = vault / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    root = tmp_path / "vault"
    write_note(root, "WuCai/Daily Note 2024-03-05-20240305.md", DAILY_NOTE)
    write_note(root, "WuCai/2024/Daily Note 2024-03-06-20240306.md", SECOND_NOTE)
    return root


@pytest.fixture
def storage(vault: Path) -> FsStorage:
    return FsStorage(vault)


@pytest.fixture
def sync_config() -> SyncConfig:
    return SyncConfig(
        enabled=True,
        source_folder="WuCai",
        target_folder="Thino",
        scan_days=0,
    )


@pytest.fixture
def add_note(vault: Path):
    def _add(rel: str, text: str) -> Path:
        return write_note(vault, rel, text)
    return _add
