"""Common type definitions for the log-backed key-value store.

Defines the record variants written to the log and the primitive aliases
shared by every component.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

# Core primitive types
Key = str
Value = str
Predicate = Callable[[Key, Value], bool]


@dataclass(frozen=True, slots=True)
class Put:
    """A live record: ``key`` maps to ``value`` from this point in the log."""

    key: Key
    value: Value

    @property
    def deleted(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Tombstone:
    """A deletion marker. Carries no value."""

    key: Key

    @property
    def deleted(self) -> bool:
        return True


Entry = Put | Tombstone
