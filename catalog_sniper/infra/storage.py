"""Key-value blob storage backing persisted catalog documents."""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath

from ..errors import StorageReadError, StorageWriteError


class BaseBlobStore(ABC):
    """Uniform storage contract: opaque bytes addressed by a relative key."""

    @abstractmethod
    def load(self, key: str) -> bytes | None:
        """Return stored bytes, or ``None`` when the key has never been written."""

    @abstractmethod
    def save(self, key: str, payload: bytes) -> None:
        """Persist ``payload`` under ``key``, replacing any previous value."""


class FileBlobStore(BaseBlobStore):
    """Store blobs as files below a root directory."""

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = root_dir
        self.root_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        relative = PurePosixPath(key.replace("\\", "/"))
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root_dir.joinpath(*relative.parts)

    def load(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageReadError(f"Cannot read {path}: {exc}", key=key) from exc

    def save(self, key: str, payload: bytes) -> None:
        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write a sibling temp file then rename so readers never see a torn document
            with tempfile.NamedTemporaryFile(
                "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as stream:
                tmp_name = stream.name
                stream.write(payload)
                stream.flush()
                os.fsync(stream.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise StorageWriteError(f"Cannot write {path}: {exc}", key=key) from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)


__all__ = ["BaseBlobStore", "FileBlobStore"]
