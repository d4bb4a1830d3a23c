"""Log replay and predicate scans.

All functions consume entries in log order and honour tombstones, so a
scan over the raw log gives the same answer as the replayed state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.types import Put, Tombstone

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.types import Entry, Key, Predicate, Value


def replay(entries: Iterable[Entry]) -> dict[Key, Value]:
    """Rebuild the canonical key -> value state from entries in log order."""
    state: dict[Key, Value] = {}
    for entry in entries:
        if isinstance(entry, Tombstone):
            state.pop(entry.key, None)
        else:
            state[entry.key] = entry.value
    return state


def lookup(entries: Iterable[Entry], key: Key) -> Value | None:
    """Return the value of key after the full sequence, or None if absent.

    Reads to the end: a later put after a tombstone revives the key.
    """
    value: Value | None = None
    for entry in entries:
        if entry.key != key:
            continue
        value = None if isinstance(entry, Tombstone) else entry.value
    return value


def select(pairs: Iterable[tuple[Key, Value]], predicate: Predicate) -> list[Put]:
    """Return a Put for every live pair accepted by predicate."""
    return [Put(key, value) for key, value in pairs if predicate(key, value)]
