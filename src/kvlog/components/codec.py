"""JSON-lines codec for log records.

Record format (one per line, UTF-8):
    {"key": "<key>", "value": "<value>"}     put
    {"key": "<key>", "deleted": true}        tombstone

An absent ``deleted`` field means false. A tombstone's ``value`` field, if
present, is ignored.
"""

from __future__ import annotations

import json

from ..core.errors import SerializationError
from ..core.types import Entry, Put, Tombstone


class MalformedRecord(ValueError):
    """A log line that does not decode to a valid entry."""
    pass


def encode(entry: Entry) -> bytes:
    """Serialize an entry to a single newline-terminated line."""
    if isinstance(entry, Put):
        record = {"key": entry.key, "value": entry.value}
    elif isinstance(entry, Tombstone):
        record = {"key": entry.key, "deleted": True}
    else:
        raise SerializationError(f"Cannot encode {type(entry).__name__}")

    try:
        line = json.dumps(record, ensure_ascii=False, separators=(",", ":"))
        return line.encode("utf-8") + b"\n"
    except (TypeError, ValueError, UnicodeEncodeError) as e:
        raise SerializationError(f"Failed to encode entry for key {entry.key!r}: {e}") from e


def decode(line: bytes) -> Entry:
    """Parse one log line (with or without its trailing newline).

    Raises:
        MalformedRecord: If the line is not a valid record
    """
    try:
        record = json.loads(line)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedRecord(f"invalid JSON: {e}") from e

    if not isinstance(record, dict):
        raise MalformedRecord("record is not an object")

    key = record.get("key")
    if not isinstance(key, str):
        raise MalformedRecord("missing or non-string key")

    deleted = record.get("deleted", False)
    if not isinstance(deleted, bool):
        raise MalformedRecord("non-boolean deleted flag")
    if deleted:
        return Tombstone(key)

    # Writers may omit an empty value
    value = record.get("value", "")
    if not isinstance(value, str):
        raise MalformedRecord("non-string value")
    return Put(key, value)
