"""Log-backed store implementation - main public API.

Orchestrates the append log, the optional memory index, the scanner and
compaction under a single readers-writer lock.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import TYPE_CHECKING
from .types import Key, Value, Put, Tombstone, Predicate
from .config import StoreConfig
from .errors import (
    CapacityError,
    KeyTooLargeError,
    LoadError,
    NotFoundError,
    StoreClosedError,
    ValidationError,
    ValueTooLargeError,
)
from ..components import scanner
from ..components.log import AppendLog
from ..components.index import MemoryIndex
from ..components.compaction import LogCompactor
from ..components.lock import ReadWriteLock

if TYPE_CHECKING:
    from ..interfaces.index import Index
    from ..interfaces.log import Log

logger = logging.getLogger(__name__)


def _utf8_size(text: str) -> int:
    return len(text.encode("utf-8", "surrogatepass"))


class LogStore:
    """Persistent key-value store over an append-only log.

    Args:
        path: Log file path; created if missing
        config: Store configuration (defaults to StoreConfig())

    Public API:
        - set(key, value): Insert or update
        - get(key): Latest value or None
        - delete(key): Append tombstone
        - find_by_function(predicate): Live entries matching predicate
        - compact(): Rewrite log to current state
        - close(): Release the log

    Invariants:
        - Every mutation reaches the log before the index
        - With the memory index enabled, index == replay(log) between operations
        - Reads that scan the log hold the shared lock for the whole scan
    """

    def __init__(self, path: str | Path, config: StoreConfig | None = None):
        self.config = config or StoreConfig()
        self._path = Path(path)
        self._lock = ReadWriteLock()

        self._log: Log = AppendLog(
            self._path,
            sync_every_write=self.config.sync_every_write,
            skip_corrupt_records=self.config.skip_corrupt_records,
        )
        self._compactor = LogCompactor(self._path, sync=self.config.sync_every_write)

        self._index: Index | None = None
        if self.config.use_memory_index:
            try:
                self._index = self._load()
            except BaseException:
                self._log.close()
                raise

        mode = "memory-indexed" if self._index is not None else "unindexed"
        logger.info(f"Opened {mode} store at {self._path}")

    def _load(self) -> MemoryIndex:
        """Build the index by replaying the full log."""
        logger.info(f"Replaying log {self._path}...")

        state = scanner.replay(self._log)
        limit = self.config.max_entries

        if len(state) > limit:
            if self.config.enforce_capacity_on_load:
                raise LoadError(
                    f"Log {self._path} holds {len(state)} live keys, exceeds max_entries={limit}"
                )
            logger.warning(
                f"Log {self._path} holds {len(state)} live keys, exceeds max_entries={limit}; "
                f"new keys will be rejected until the count drops below the limit"
            )

        logger.info(f"Loaded {len(state)} live keys from {self._path}")
        return MemoryIndex(state)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._log.closed

    @property
    def uses_memory_index(self) -> bool:
        return self.config.use_memory_index

    def _check_open(self) -> None:
        if self._log.closed:
            raise StoreClosedError(f"Store at {self._path} is closed")

    def _validate_key(self, key: Key) -> None:
        if not isinstance(key, str):
            raise ValidationError(f"key must be str, got {type(key).__name__}")
        size = _utf8_size(key)
        if size > self.config.max_key_bytes:
            raise KeyTooLargeError(size, self.config.max_key_bytes)

    def _validate_value(self, value: Value) -> None:
        if not isinstance(value, str):
            raise ValidationError(f"value must be str, got {type(value).__name__}")
        size = _utf8_size(value)
        if size > self.config.max_value_bytes:
            raise ValueTooLargeError(size, self.config.max_value_bytes)

    def set(self, key: Key, value: Value) -> None:
        """Insert or update key with value.

        Raises:
            ValidationError: Key or value is not a str or exceeds its size limit
            CapacityError: Index is full and key is new
            SerializationError: Entry cannot be encoded
            LogIOError: Append failed; index left unchanged
            StoreClosedError: Store is closed
        """
        with self._lock.write():
            self._check_open()
            self._validate_key(key)
            self._validate_value(value)

            if (
                self._index is not None
                and key not in self._index
                and len(self._index) >= self.config.max_entries
            ):
                raise CapacityError(
                    f"Store has reached max number of keys ({self.config.max_entries})"
                )

            self._log.append(Put(key, value))

            if self._index is not None:
                self._index.put(key, value)

    def get(self, key: Key) -> Value | None:
        """Retrieve latest value for key, or None if absent.

        Without the memory index this scans the whole log.
        """
        with self._lock.read():
            self._check_open()
            if self._index is not None:
                return self._index.get(key)
            return scanner.lookup(self._log, key)

    def delete(self, key: Key) -> None:
        """Append a tombstone for key.

        Deleting an absent key is not an error; the tombstone is still written.
        Only the key type is checked: a key stored under a larger
        max_key_bytes must stay deletable.
        """
        with self._lock.write():
            self._check_open()
            if not isinstance(key, str):
                raise ValidationError(f"key must be str, got {type(key).__name__}")

            self._log.append(Tombstone(key))

            if self._index is not None:
                self._index.remove(key)

    def find_by_function(self, predicate: Predicate) -> list[Put]:
        """Return every live entry for which predicate(key, value) is true.

        The live state is snapshotted under the shared lock and the predicate
        runs after it is released, so it may call back into the store.

        Raises:
            NotFoundError: Nothing matched
        """
        if not callable(predicate):
            raise TypeError(f"predicate must be callable, got {type(predicate).__name__}")

        pairs = self._snapshot()
        matches = scanner.select(pairs, predicate)

        if not matches:
            raise NotFoundError("No live entries matched the predicate")
        return matches

    def _snapshot(self) -> list[tuple[Key, Value]]:
        """Return live (key, value) pairs in key order."""
        with self._lock.read():
            self._check_open()
            if self._index is not None:
                return list(self._index.items())
            return sorted(scanner.replay(self._log).items())

    def compact(self) -> int:
        """Rewrite the log to one record per live key.

        Returns:
            Number of records in the compacted log

        Raises:
            CompactionError: Temp log could not be written or renamed; the
                original log is untouched
        """
        with self._lock.write():
            self._check_open()

            if self._index is not None:
                pairs = list(self._index.items())
            else:
                pairs = sorted(scanner.replay(self._log).items())

            size_before = self._log.size_bytes()
            count = self._compactor.compact(pairs)
            self._log.reopen()

            logger.info(
                f"Compacted {self._path}: {size_before} -> {self._log.size_bytes()} bytes, "
                f"{count} live keys"
            )
            return count

    def items(self) -> list[tuple[Key, Value]]:
        """Return a snapshot of live (key, value) pairs in key order."""
        return self._snapshot()

    def __contains__(self, key: Key) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock.read():
            self._check_open()
            if self._index is not None:
                return len(self._index)
            return len(scanner.replay(self._log))

    def sync(self) -> None:
        """Force appended data to disk (fsync)."""
        with self._lock.write():
            self._check_open()
            self._log.sync()

    def close(self) -> None:
        """Close store and release resources. Safe to call twice."""
        with self._lock.write():
            if self._log.closed:
                return
            logger.info(f"Closing store at {self._path}")
            try:
                self._log.close()
            finally:
                if self._index is not None:
                    self._index.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"{type(self).__name__}({str(self._path)!r}, {state})"


def open_store(path: str | Path, **options) -> LogStore:
    """Open a store at path, building StoreConfig from keyword options.

    Example:
        store = open_store("data.log", use_memory_index=False)
    """
    return LogStore(path, StoreConfig(**options))
