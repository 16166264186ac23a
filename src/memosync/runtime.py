"""Runtime wiring helper for CLI, watcher and API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.json_state import JsonStateStore
from .config import MemoSyncConfig, load_config
from .converter import NoteConverter
from .core.model import SyncResult, SyncStatus
from .core.ports import StateStore, Storage
from .parser import EntryParser
from .sync import SyncService


@dataclass
class Runtime:
    """Container for all wired components."""
    storage: Storage
    state_store: StateStore
    service: SyncService
    config: MemoSyncConfig

    def sync(self) -> SyncResult:
        """Run one sync and persist the resulting state."""
        state = self.state_store.load()
        result = self.service.sync_all(state)
        if result.state is not None and result.state is not state:
            self.state_store.save(result.state)
        return result

    def reset(self) -> None:
        state = self.state_store.load()
        self.state_store.save(self.service.reset_sync_state(state))

    def status(self) -> SyncStatus:
        return self.service.get_sync_status(self.state_store.load())


def build_service(storage: Storage, config: MemoSyncConfig) -> SyncService:
    converter = NoteConverter(
        filename_format=config.target.filename_format,
        memo_type=config.target.note_type,
        tags=[config.target.tag] if config.target.tag else [],
    )
    return SyncService(
        storage,
        config.to_sync_config(),
        converter=converter,
        parser=EntryParser(config.source.section),
    )


def build_runtime(
    vault_path: Path | None = None,
    state_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    # CLI args win over config values
    if vault_path is not None:
        config.vault.root = vault_path
    if state_path is not None:
        config.vault.state = state_path

    storage = FsStorage(config.vault.root)
    return Runtime(
        storage=storage,
        state_store=JsonStateStore(config.vault.state),
        service=build_service(storage, config),
        config=config,
    )
