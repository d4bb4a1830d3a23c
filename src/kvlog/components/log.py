"""Append-only log implementation.

Provides the durable record of every put and tombstone, one JSON line per entry.
"""

from __future__ import annotations
import os
import logging
from pathlib import Path
from typing import Iterator
from ..core.types import Entry
from ..core.errors import LogCorruptionError, LogIOError, StoreClosedError
from . import codec

logger = logging.getLogger(__name__)


class AppendLog:
    """Append-only log of entries backed by a single file.

    Args:
        path: Path to log file (created if missing)
        sync_every_write: Whether to fsync after each append
        skip_corrupt_records: Skip malformed lines on replay instead of raising

    Invariants:
        - Each entry is written as one complete line, unbuffered
        - A failed append leaves no bytes of its record in the file
        - Records are returned in append order
    """

    def __init__(self, path: str | Path, sync_every_write: bool = True, skip_corrupt_records: bool = True):
        self.path = Path(path)
        self.sync_every_write = sync_every_write
        self.skip_corrupt_records = skip_corrupt_records
        self._fd = None
        self._open_for_write()

    def _open_for_write(self) -> None:
        """Open log file for appending.

        The handle is unbuffered: every write goes straight to the OS, so a
        failed append can never be flushed later by an unrelated one.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fd = open(self.path, 'ab', buffering=0)
            self._terminate_torn_tail()
        except OSError as e:
            if self._fd:
                self._fd.close()
                self._fd = None
            raise LogIOError(f"Failed to open log {self.path}: {e}") from e
        logger.debug(f"Opened log {self.path} at offset {self._fd.tell()}")

    def _terminate_torn_tail(self) -> None:
        """End an unterminated final line so new appends start on a fresh line."""
        end = self._fd.seek(0, os.SEEK_END)
        if end == 0:
            return
        with open(self.path, 'rb') as f:
            f.seek(end - 1)
            last = f.read(1)
        if last != b'\n':
            logger.warning(f"Log {self.path} ends with an unterminated record, sealing it")
            self._write_all(b'\n')

    def _write_all(self, data: bytes) -> None:
        """Write data in full; raw writes may be short."""
        view = memoryview(data)
        while view:
            written = self._fd.write(view)
            if not written:
                raise OSError(f"Short write to {self.path}")
            view = view[written:]

    @property
    def closed(self) -> bool:
        return self._fd is None

    def append(self, entry: Entry) -> None:
        """Append an entry to the log.

        Raises:
            SerializationError: If the entry cannot be encoded
            LogIOError: If the write fails; the partial record is rolled back
            StoreClosedError: If the log is closed
        """
        if self._fd is None:
            raise StoreClosedError("Log is closed")

        record = codec.encode(entry)
        offset = self._fd.seek(0, os.SEEK_END)

        try:
            self._write_all(record)
            if self.sync_every_write:
                os.fsync(self._fd.fileno())
        except OSError as e:
            logger.error(f"Append to {self.path} failed at offset {offset}: {e}")
            self._rollback(offset)
            raise LogIOError(f"Failed to append to log {self.path}: {e}") from e

        logger.debug(f"Appended record at offset {offset}, key_len={len(entry.key)}, deleted={entry.deleted}")

    def _rollback(self, offset: int) -> None:
        """Cut a partially written record off the end of the file.

        Falls back to truncating by path through a fresh handle when the
        append handle itself is unusable.
        """
        try:
            self._fd.truncate(offset)
            self._fd.seek(offset)
            return
        except (OSError, ValueError) as e:
            logger.warning(f"In-place rollback failed for {self.path}: {e}; retrying with a fresh handle")

        try:
            self._fd.close()
        except OSError as e:
            logger.warning(f"Error closing failed log handle {self.path}: {e}")
        self._fd = None

        try:
            os.truncate(self.path, offset)
        except OSError as e:
            logger.error(f"Could not remove partial record from {self.path}: {e}")

        # Seals any leftover partial line if the truncate above failed
        self._open_for_write()

    def sync(self) -> None:
        """Force data to disk (fsync)."""
        if self._fd:
            try:
                os.fsync(self._fd.fileno())
            except OSError as e:
                raise LogIOError(f"Failed to sync log {self.path}: {e}") from e

    def reopen(self) -> None:
        """Release the current handle and reopen the path for appending.

        Used after the file at ``path`` has been replaced.
        """
        if self._fd:
            self._fd.close()
            self._fd = None
        self._open_for_write()

    def close(self) -> None:
        """Close writer and release resources."""
        if self._fd:
            try:
                self.sync()
            finally:
                self._fd.close()
                self._fd = None
            logger.info(f"Closed log {self.path}")

    def size_bytes(self) -> int:
        """Return current size of the log file in bytes."""
        try:
            return self.path.stat().st_size
        except FileNotFoundError:
            return 0

    def count_records(self) -> int:
        """Return number of decodable records in the log."""
        return sum(1 for _ in self)

    def __iter__(self) -> Iterator[Entry]:
        """Iterate entries in append order.

        Malformed lines, including a torn final line, are skipped with a
        warning or raise LogCorruptionError depending on skip_corrupt_records.
        """
        try:
            f = open(self.path, 'rb')
        except FileNotFoundError:
            return
        except OSError as e:
            raise LogIOError(f"Failed to read log {self.path}: {e}") from e

        with f:
            for line_no, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    entry = codec.decode(line)
                except codec.MalformedRecord as e:
                    torn = not line.endswith(b'\n')
                    reason = f"partial record at EOF ({e})" if torn else str(e)
                    if not self.skip_corrupt_records:
                        raise LogCorruptionError(line_no, reason) from e
                    logger.warning(f"Skipping malformed record in {self.path} at line {line_no}: {reason}")
                    continue
                yield entry

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
