"""Protocol definitions for the append-only log."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from ..core.types import Entry


@runtime_checkable
class Log(Protocol):
    """Durable, ordered sequence of entries."""

    @property
    def closed(self) -> bool:
        """True once close() has run."""
        ...

    def append(self, entry: Entry) -> None:
        """Append an entry to the log.

        Invariants:
            - Visible to a subsequent __iter__ on return
            - Durable on return if config.sync_every_write is True
            - A failed append leaves no partial record behind
        """
        ...

    def __iter__(self) -> Iterator[Entry]:
        """Iterate entries in append order."""
        ...

    def sync(self) -> None:
        """Force data to disk (fsync)."""
        ...

    def reopen(self) -> None:
        """Reopen the append handle after the file has been replaced."""
        ...

    def size_bytes(self) -> int:
        """Return current on-disk size."""
        ...

    def close(self) -> None:
        """Close writer and release resources."""
        ...
