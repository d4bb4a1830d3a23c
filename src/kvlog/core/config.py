"""Configuration for the log-backed store.

Defines all tunable parameters; fixed for the lifetime of a store.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StoreConfig:
    """Configuration parameters for a LogStore.

    Attributes:
        use_memory_index: Keep an in-memory mirror of the log for O(1) reads
        max_entries: Maximum number of distinct keys held by the index
        max_key_bytes: Maximum UTF-8 size of a key
        max_value_bytes: Maximum UTF-8 size of a value
        sync_every_write: Whether to fsync after each append
        skip_corrupt_records: Skip malformed log lines during replay instead of raising
        enforce_capacity_on_load: Reject a log whose live keys exceed max_entries
    """

    use_memory_index: bool = True
    max_entries: int = 10_000
    max_key_bytes: int = 256
    max_value_bytes: int = 4096
    sync_every_write: bool = True
    skip_corrupt_records: bool = True
    enforce_capacity_on_load: bool = False

    def __post_init__(self) -> None:
        for name in ("max_entries", "max_key_bytes", "max_value_bytes"):
            limit = getattr(self, name)
            if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
                raise ValueError(f"{name} must be a positive integer, got {limit!r}")
