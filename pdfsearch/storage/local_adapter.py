from pathlib import Path

from pdfsearch.storage.base import BaseObjectStore
from pdfsearch.storage.exceptions import ObjectStoreError


class LocalObjectStore(BaseObjectStore):
    """Keeps payloads as files under a root directory. The handle is the key."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def store(self, key: str, payload: bytes) -> str:
        path = self._resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            raise ObjectStoreError(f"Failed to write {key}: {exc}") from exc
        return key

    def load(self, handle: str) -> bytes:
        path = self._resolve_path(handle)
        if not path.exists():
            raise ObjectStoreError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ObjectStoreError(f"Failed to read {handle}: {exc}") from exc

    def delete(self, handle: str) -> None:
        path = self._resolve_path(handle)
        try:
            path.unlink()
        except OSError as exc:
            raise ObjectStoreError(f"Failed to delete {handle}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        root = self._files_root.resolve()
        path = (root / key).resolve()
        if not path.is_relative_to(root):
            raise ObjectStoreError(f"Key '{key}' escapes the storage root")
        return path
