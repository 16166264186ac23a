from typing import Protocol

from .model import FileNode, SyncState


class Storage(Protocol):
    """
    Vault-relative file access. Paths use POSIX separators; "" is the root.
    Listing is one level deep; callers recurse.
    """

    def read_text(self, path: str) -> str:
        pass

    def list_children(self, folder: str) -> list[FileNode]:
        pass

    def exists(self, path: str) -> bool:
        pass

    def is_folder(self, path: str) -> bool:
        pass

    def create_folder(self, path: str) -> None:
        pass

    def create_file(self, path: str, content: str) -> None:
        pass


class StateStore(Protocol):
    """
    Opaque load/save of the persisted sync state blob.
    """

    def load(self) -> SyncState:
        pass

    def save(self, state: SyncState) -> None:
        pass
