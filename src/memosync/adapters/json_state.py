"""JSON file persistence for the sync state blob."""

import json
from pathlib import Path

from ..core.model import SyncState
from ..core.ports import StateStore


class JsonStateStore(StateStore):
    def __init__(self, path: Path):
        self.path = path

    def load(self) -> SyncState:
        """Load state; a missing file is a fresh state."""
        if not self.path.exists():
            return SyncState()
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return SyncState.from_dict(data or {})

    def save(self, state: SyncState) -> None:
        """Write state atomically via a temp file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(state.to_dict(), f, indent=2, ensure_ascii=False)
        tmp_path.replace(self.path)


class MemoryStateStore(StateStore):
    """In-process state holder for embedding and tests."""

    def __init__(self, state: SyncState | None = None):
        self.state = state or SyncState()
        self.saves = 0

    def load(self) -> SyncState:
        return self.state.copy()

    def save(self, state: SyncState) -> None:
        self.state = state.copy()
        self.saves += 1
