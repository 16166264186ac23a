"""Configuration loader for memosync.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .converter import DEFAULT_FILENAME_FORMAT, DEFAULT_MEMO_TYPE, DEFAULT_TAG
from .discovery import DEFAULT_PREFIX
from .errors import ConfigurationError
from .parser import DEFAULT_SECTION_MARKER
from .sync import SyncConfig

CONFIG_FILENAME = "memosync.toml"
SYNC_MODES = ("auto", "manual")


@dataclass
class VaultConfig:
    """Vault location and where sync state is persisted."""
    root: Path
    state: Path


@dataclass
class SyncSettings:
    """Sync behaviour and triggers."""
    enabled: bool = False
    mode: str = "manual"
    interval_minutes: int = 30
    scan_days: int = 7
    on_startup: bool = False
    debug: bool = False


@dataclass
class SourceConfig:
    """Where daily notes live and how to recognise them."""
    folder: str = ""
    prefix: str = DEFAULT_PREFIX
    section: str = DEFAULT_SECTION_MARKER


@dataclass
class TargetConfig:
    """Where memo notes are written and how they are named."""
    folder: str = ""
    filename_format: str = DEFAULT_FILENAME_FORMAT
    note_type: str = DEFAULT_MEMO_TYPE
    tag: str = DEFAULT_TAG


@dataclass
class MemoSyncConfig:
    """Complete memosync configuration."""
    vault: VaultConfig
    sync: SyncSettings
    source: SourceConfig
    target: TargetConfig

    def to_sync_config(self) -> SyncConfig:
        return SyncConfig(
            enabled=self.sync.enabled,
            source_folder=self.source.folder,
            target_folder=self.target.folder,
            scan_days=self.sync.scan_days,
            source_prefix=self.source.prefix,
            section_marker=self.source.section,
        )


def validate_config(config: MemoSyncConfig) -> None:
    """Raise ConfigurationError for values the sync cannot work with."""
    if config.sync.mode not in SYNC_MODES:
        raise ConfigurationError(
            f"sync.mode must be one of {', '.join(SYNC_MODES)}, got {config.sync.mode!r}"
        )
    if config.sync.interval_minutes <= 0:
        raise ConfigurationError("sync.interval_minutes must be positive")
    if config.sync.scan_days < 0:
        raise ConfigurationError("sync.scan_days must be zero or positive")
    if "{id}" not in config.target.filename_format:
        raise ConfigurationError("target.filename_format must contain {id}")
    if not config.target.filename_format.endswith(".md"):
        raise ConfigurationError("target.filename_format must end in .md")


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> MemoSyncConfig:
    """
    Load configuration from memosync.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/memosync.toml
    3. vault_path/memosync.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        MemoSyncConfig with resolved settings

    Raises:
        ConfigurationError: explicit config_path missing, unreadable TOML,
            or invalid values
    """
    toml_data: dict[str, Any] = {}

    if config_path and not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e
            break

    # Parse vault config
    vault_data = toml_data.get("vault", {})
    vault_root = Path(vault_data.get("root", vault_path or Path(".")))
    vault_state = Path(vault_data.get("state", vault_root / ".memosync" / "state.json"))

    sync_data = toml_data.get("sync", {})
    sync_settings = SyncSettings(
        enabled=sync_data.get("enabled", False),
        mode=sync_data.get("mode", "manual"),
        interval_minutes=sync_data.get("interval_minutes", 30),
        scan_days=sync_data.get("scan_days", 7),
        on_startup=sync_data.get("on_startup", False),
        debug=sync_data.get("debug", False),
    )

    source_data = toml_data.get("source", {})
    source_config = SourceConfig(
        folder=source_data.get("folder", ""),
        prefix=source_data.get("prefix", DEFAULT_PREFIX),
        section=source_data.get("section", DEFAULT_SECTION_MARKER),
    )

    target_data = toml_data.get("target", {})
    target_config = TargetConfig(
        folder=target_data.get("folder", ""),
        filename_format=target_data.get("filename_format", DEFAULT_FILENAME_FORMAT),
        note_type=target_data.get("note_type", DEFAULT_MEMO_TYPE),
        tag=target_data.get("tag", DEFAULT_TAG),
    )

    config = MemoSyncConfig(
        vault=VaultConfig(root=vault_root, state=vault_state),
        sync=sync_settings,
        source=source_config,
        target=target_config,
    )
    validate_config(config)
    return config
