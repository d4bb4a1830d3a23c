"""Exception hierarchy for kvlog.

Defines all custom exceptions used throughout the implementation.
"""

from __future__ import annotations


class KVLogError(Exception):
    """Base exception for all kvlog errors."""
    pass


class ValidationError(KVLogError, ValueError):
    """Raised when a key or value violates the configured limits."""
    pass


class KeyTooLargeError(ValidationError):
    """Raised when a key exceeds max_key_bytes."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"key is {size} bytes, exceeds max size of {limit} bytes")


class ValueTooLargeError(ValidationError):
    """Raised when a value exceeds max_value_bytes."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"value is {size} bytes, exceeds max size of {limit} bytes")


class CapacityError(KVLogError):
    """Raised when the index is full and a new key is inserted."""
    pass


class SerializationError(KVLogError):
    """Raised when an entry cannot be encoded to the log format."""
    pass


class LogIOError(KVLogError, OSError):
    """Raised when opening, appending to or syncing the log fails."""
    pass


class LogCorruptionError(KVLogError):
    """Raised when a malformed log record is found and skipping is disabled."""

    def __init__(self, line_no: int, reason: str):
        self.line_no = line_no
        self.reason = reason
        super().__init__(f"Malformed log record at line {line_no}: {reason}")


class CompactionError(KVLogError):
    """Raised when compaction fails; the original log is left intact."""
    pass


class NotFoundError(KVLogError, LookupError):
    """Raised when a predicate search matches no live entry."""
    pass


class StoreClosedError(KVLogError):
    """Raised when an operation is attempted on a closed store."""
    pass


class LoadError(KVLogError):
    """Raised when replaying the log cannot satisfy the capacity policy."""
    pass
