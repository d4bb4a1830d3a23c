"""In-memory index implementation.

Uses sortedcontainers.SortedDict so dumps and searches run in key order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sortedcontainers import SortedDict

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from ..core.types import Key, Value


class MemoryIndex:
    """In-memory mirror of the live keys in the log.

    Holds only current values; deleted keys are removed rather than
    marked, so every key present is live.

    Invariants:
        - Equal to the replayed log whenever no mutation is in flight
        - Keys are always maintained in sorted order
    """

    def __init__(self, data: Mapping[Key, Value] | None = None):
        """Initialize index, optionally from replayed state."""
        self._data: SortedDict = SortedDict(data or {})

    def put(self, key: Key, value: Value) -> None:
        """Insert or update key with value."""
        self._data[key] = value

    def remove(self, key: Key) -> bool:
        """Drop key; return True if it was present."""
        return self._data.pop(key, None) is not None

    def get(self, key: Key) -> Value | None:
        """Return current value for key, or None if absent."""
        return self._data.get(key)

    def __contains__(self, key: Key) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def clear(self) -> None:
        """Clear all entries."""
        self._data.clear()

    def items(self) -> Iterable[tuple[Key, Value]]:
        """Return iterator of all pairs in sorted key order."""
        yield from self._data.items()

    def __iter__(self) -> Iterator[Key]:
        return iter(self._data)
