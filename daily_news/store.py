"""
Document store used to persist daily notes.

Paths are vault-relative POSIX strings such as
"News Archive/2024-03/Daily News - 2024-03-01.md".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
import re

from .errors import StorageError


_SLASHES_RE = re.compile(r"/+")


def normalize_path(path: str) -> str:
    """Use forward slashes, collapse repeats, strip leading/trailing slashes."""
    cleaned = _SLASHES_RE.sub("/", path.replace("\\", "/").strip())
    return cleaned.strip("/")


class DocumentStore(ABC):
    """Key-value document store keyed by path."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def create(self, path: str, text: str) -> None:
        """Create a new document. Never overwrites an existing one."""
        raise NotImplementedError

    @abstractmethod
    def create_folder(self, path: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def rename(self, old_path: str, new_path: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def read(self, path: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def list_files(self, folder: str) -> list[str]:
        """Return paths of files directly inside folder (non-recursive)."""
        raise NotImplementedError


class FileSystemStore(DocumentStore):
    """Stores documents as files under a root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / normalize_path(path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def create(self, path: str, text: str) -> None:
        target = self._resolve(path)
        try:
            with target.open("x", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as exc:
            raise StorageError(f"Failed to create {path}: {exc}") from exc

    def create_folder(self, path: str) -> None:
        try:
            self._resolve(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to create folder {path}: {exc}") from exc

    def rename(self, old_path: str, new_path: str) -> None:
        source = self._resolve(old_path)
        target = self._resolve(new_path)
        if target.exists():
            raise StorageError(f"Target already exists: {new_path}")
        try:
            source.rename(target)
        except OSError as exc:
            raise StorageError(f"Failed to move {old_path} to {new_path}: {exc}") from exc

    def read(self, path: str) -> str:
        try:
            return self._resolve(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc

    def list_files(self, folder: str) -> list[str]:
        base = self._resolve(folder)
        if not base.is_dir():
            return []
        prefix = normalize_path(folder)
        return sorted(
            f"{prefix}/{child.name}" if prefix else child.name
            for child in base.iterdir()
            if child.is_file()
        )
