"""Protocol definition for the in-memory index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.types import Key, Value


@runtime_checkable
class Index(Protocol):
    """Mapping of live keys to their current values."""

    def put(self, key: Key, value: Value) -> None:
        """Insert or update key with value."""
        ...

    def remove(self, key: Key) -> bool:
        """Drop key; return True if it was present."""
        ...

    def get(self, key: Key) -> Value | None:
        """Return current value, or None if absent."""
        ...

    def __contains__(self, key: Key) -> bool:
        ...

    def __len__(self) -> int:
        ...

    def clear(self) -> None:
        """Clear all entries."""
        ...

    def items(self) -> Iterable[tuple[Key, Value]]:
        """Return iterator of all live pairs."""
        ...
