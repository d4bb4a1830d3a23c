"""kvlog - embeddable key-value store over an append-only log."""

from .core.config import StoreConfig
from .core.errors import (
    KVLogError,
    ValidationError,
    KeyTooLargeError,
    ValueTooLargeError,
    CapacityError,
    SerializationError,
    LogIOError,
    LogCorruptionError,
    CompactionError,
    NotFoundError,
    StoreClosedError,
    LoadError,
)
from .core.store import LogStore, open_store
from .core.types import Key, Value, Predicate, Put, Tombstone, Entry

__all__ = [
    "StoreConfig",
    "KVLogError",
    "ValidationError",
    "KeyTooLargeError",
    "ValueTooLargeError",
    "CapacityError",
    "SerializationError",
    "LogIOError",
    "LogCorruptionError",
    "CompactionError",
    "NotFoundError",
    "StoreClosedError",
    "LoadError",
    "LogStore",
    "open_store",
    "Key",
    "Value",
    "Predicate",
    "Put",
    "Tombstone",
    "Entry",
]
