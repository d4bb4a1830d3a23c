"""Unit tests for the JSON-lines record codec."""

import pytest

from kvlog.components import codec
from kvlog.core.errors import SerializationError
from kvlog.core.types import Put, Tombstone


def test_encode_put():
    """Test a put encodes to a single terminated JSON line."""
    assert codec.encode(Put("k", "v")) == b'{"key":"k","value":"v"}\n'


def test_encode_tombstone_has_no_value():
    """Test a tombstone carries only the key and the deleted flag."""
    assert codec.encode(Tombstone("k")) == b'{"key":"k","deleted":true}\n'


def test_encode_non_ascii_is_utf8():
    """Test non-ASCII text is written as UTF-8, not escaped."""
    line = codec.encode(Put("clé", "日本"))

    assert line == '{"key":"clé","value":"日本"}\n'.encode("utf-8")
    assert codec.decode(line) == Put("clé", "日本")


def test_encode_unencodable_text_raises():
    """Test that lone surrogates cannot be serialized."""
    with pytest.raises(SerializationError):
        codec.encode(Put("key", "\ud800"))


def test_encode_rejects_unknown_type():
    """Test encoding something that is not an entry."""
    with pytest.raises(SerializationError):
        codec.encode(("key", "value"))


def test_decode_deleted_ignores_value():
    """Test a deleted record decodes as a tombstone whatever its value field."""
    assert codec.decode(b'{"key":"k","value":"stale","deleted":true}') == Tombstone("k")


def test_decode_explicit_not_deleted():
    """Test deleted=false is a normal put."""
    assert codec.decode(b'{"key":"k","value":"v","deleted":false}\n') == Put("k", "v")


def test_decode_missing_value_is_empty():
    """Test a put written without a value field reads back as empty string."""
    assert codec.decode(b'{"key":"k"}') == Put("k", "")


@pytest.mark.parametrize(
    "line",
    [
        b"not json",
        b'["key", "value"]',
        b'{"value":"v"}',
        b'{"key":1,"value":"v"}',
        b'{"key":"k","value":5}',
        b'{"key":"k","deleted":"yes"}',
        b'\xff\xfe',
    ],
)
def test_decode_malformed(line):
    """Test malformed lines raise MalformedRecord."""
    with pytest.raises(codec.MalformedRecord):
        codec.decode(line)
