from pathlib import Path

from ..core.model import FileNode
from ..core.ports import Storage
from ..errors import StorageError


class FsStorage(Storage):
    """
    Vault directory on the local filesystem. All paths are relative to ``root``.
    """

    def __init__(self, root: Path):
        self.root = root

    def _path(self, path: str) -> Path:
        return self.root / path if path else self.root

    def _rel(self, p: Path) -> str:
        return p.relative_to(self.root).as_posix()

    def read_text(self, path: str) -> str:
        try:
            return self._path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def list_children(self, folder: str) -> list[FileNode]:
        p = self._path(folder)
        if not p.is_dir():
            return []
        return [
            FileNode(
                path=self._rel(child),
                name=child.name,
                is_folder=child.is_dir(),
                extension="" if child.is_dir() else child.suffix.lstrip("."),
            )
            for child in sorted(p.iterdir())
        ]

    def exists(self, path: str) -> bool:
        return self._path(path).exists()

    def is_folder(self, path: str) -> bool:
        return self._path(path).is_dir()

    def create_folder(self, path: str) -> None:
        self._path(path).mkdir(parents=True, exist_ok=True)

    def create_file(self, path: str, content: str) -> None:
        """
        Create a new file. Never overwrites; a failed write leaves nothing behind.
        """
        dst = self._path(path)
        if dst.exists():
            raise StorageError(f"File already exists: {path}")

        tmp = dst.with_name(f".{dst.name}.tmp")
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(content, encoding="utf-8")
            tmp.replace(dst)
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {e}") from e
