import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def build_object_key(
    prefix: str,
    document_id: str,
    filename: str,
    now: datetime | None = None,
) -> str:
    """Build a temporary object key: {prefix}/{epoch_millis}-{document_id}-{sanitized_filename}.

    The document id keeps keys unique when uploads with the same name land
    in the same millisecond.
    """
    moment = now or datetime.now(timezone.utc)
    millis = int(moment.timestamp() * 1000)
    sanitized = _UNSAFE_KEY_CHARS.sub("_", filename).lower()
    return f"{prefix.rstrip('/')}/{millis}-{document_id}-{sanitized}"


class BaseObjectStore(ABC):
    """Contract for temporary payload storage."""

    @abstractmethod
    def store(self, key: str, payload: bytes) -> str:
        """Persist the payload under key and return its handle.

        Raises:
            ObjectStoreError: if the payload cannot be written.
        """

    @abstractmethod
    def load(self, handle: str) -> bytes:
        """Read a stored payload back.

        Raises:
            ObjectStoreError: if the handle is unknown or unreadable.
        """

    @abstractmethod
    def delete(self, handle: str) -> None:
        """Remove a stored payload.

        Raises:
            ObjectStoreError: if the payload cannot be removed.
        """

    def close(self) -> None:
        """Release underlying connections."""
