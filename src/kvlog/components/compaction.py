"""Compaction implementation.

Rewrites the log to one put per live key, dropping tombstones and
overwritten values.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.errors import CompactionError, SerializationError
from ..core.types import Put
from . import codec

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.types import Key, Value

logger = logging.getLogger(__name__)


class LogCompactor:
    """Write-temp-then-rename compaction for a single log file.

    Args:
        log_path: Path of the live log
        sync: Whether to fsync the temp file and directory before returning

    Invariants:
        - The live log is never truncated or written in place
        - os.replace is the commit point; any earlier failure leaves the
          live log byte-for-byte unchanged
    """

    def __init__(self, log_path: str | Path, sync: bool = True):
        """Initialize compactor for the log at log_path."""
        self.log_path: Path = Path(log_path)
        self.temp_path: Path = self.log_path.with_name(self.log_path.name + ".tmp")
        self.sync: bool = sync

    def compact(self, pairs: Iterable[tuple[Key, Value]]) -> int:
        """Replace the live log with one record per pair.

        Args:
            pairs: Canonical (key, value) state to persist

        Returns:
            Number of records written

        Raises:
            CompactionError: If the temp log cannot be written or renamed
        """
        logger.info(f"Compacting {self.log_path} via {self.temp_path}")

        try:
            count = self._write_output(pairs)
        except (OSError, SerializationError) as e:
            logger.error(f"Failed to write compacted log {self.temp_path}: {e}")
            self._discard_temp()
            raise CompactionError(f"Failed to write compacted log {self.temp_path}: {e}") from e

        try:
            os.replace(self.temp_path, self.log_path)
        except OSError as e:
            logger.error(f"Failed to replace {self.log_path} with compacted log: {e}")
            self._discard_temp()
            raise CompactionError(f"Failed to replace {self.log_path}: {e}") from e

        if self.sync:
            self._sync_directory()

        logger.info(f"Compaction wrote {count} records to {self.log_path}")
        return count

    def _write_output(self, pairs: Iterable[tuple[Key, Value]]) -> int:
        """Write pairs to the temp log; return record count."""
        count = 0
        with open(self.temp_path, "wb") as f:
            for key, value in pairs:
                f.write(codec.encode(Put(key, value)))
                count += 1
            f.flush()
            if self.sync:
                os.fsync(f.fileno())
        return count

    def _discard_temp(self) -> None:
        """Remove a leftover temp log, if any."""
        try:
            self.temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temp log {self.temp_path}: {e}")

    def _sync_directory(self) -> None:
        """Persist the rename by syncing the parent directory where supported."""
        try:
            fd = os.open(self.log_path.parent, os.O_RDONLY)
        except OSError as e:
            logger.debug(f"Directory sync unavailable for {self.log_path.parent}: {e}")
            return
        try:
            os.fsync(fd)
        except OSError as e:
            logger.debug(f"Directory sync failed for {self.log_path.parent}: {e}")
        finally:
            os.close(fd)
