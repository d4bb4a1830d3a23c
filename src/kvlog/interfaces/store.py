"""Protocol definition for the key-value store."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..core.types import Key, Predicate, Put, Value


@runtime_checkable
class KVStore(Protocol):
    """Public API for the log-backed storage engine."""

    def set(self, key: Key, value: Value) -> None:
        """Validate, append a put, then update the index."""
        ...

    def get(self, key: Key) -> Value | None:
        """Return latest value for key or None if not present."""
        ...

    def delete(self, key: Key) -> None:
        """Append a tombstone; never fails for an absent key."""
        ...

    def find_by_function(self, predicate: Predicate) -> list[Put]:
        """Return live entries matching predicate; raise NotFoundError if none."""
        ...

    def compact(self) -> int:
        """Rewrite the log to its minimal form (administrative)."""
        ...

    def close(self) -> None:
        """Release the log; later operations raise StoreClosedError."""
        ...
