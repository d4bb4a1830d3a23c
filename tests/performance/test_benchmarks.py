"""Performance benchmarks for the log-backed store."""

import random
import shutil
import tempfile
import time
from pathlib import Path

import pytest

from kvlog import LogStore, StoreConfig

pytestmark = pytest.mark.performance


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


def make_store(temp_dir, use_memory_index):
    config = StoreConfig(
        use_memory_index=use_memory_index,
        max_entries=100_000,
        sync_every_write=False,  # Faster writes
    )
    return LogStore(Path(temp_dir) / "bench.log", config)


def test_sequential_write_performance(temp_dir):
    """Benchmark sequential write performance."""
    num_records = 10000
    store = make_store(temp_dir, use_memory_index=True)

    keys = [f"key{i:08d}" for i in range(num_records)]
    values = [f"value{i}".ljust(100, "x") for i in range(num_records)]

    start_time = time.time()

    for key, value in zip(keys, values, strict=True):
        store.set(key, value)
    store.sync()

    duration = time.time() - start_time
    writes_per_second = num_records / duration if duration > 0 else float("inf")

    print(f"\nSequential writes: {writes_per_second:.0f} ops/sec")
    print(f"Total time: {duration:.3f}s for {num_records} records")

    store.close()
    assert writes_per_second > 1000  # At least 1K ops/sec


def test_indexed_vs_scan_read_performance(temp_dir):
    """Compare memory-index reads against full log scans."""
    num_records = 2000
    num_reads = 50

    store = make_store(temp_dir, use_memory_index=False)
    for i in range(num_records):
        store.set(f"key{i:08d}", f"value{i}")
    store.close()

    keys = [f"key{random.randrange(num_records):08d}" for _ in range(num_reads)]
    timings = {}
    for use_memory_index in (True, False):
        store = make_store(temp_dir, use_memory_index)
        start_time = time.time()
        for key in keys:
            assert store.get(key) is not None
        timings[use_memory_index] = time.time() - start_time
        store.close()

    print(f"\nIndexed reads: {timings[True]:.4f}s, scanned reads: {timings[False]:.4f}s for {num_reads} gets")

    assert timings[True] <= timings[False]


def test_compaction_performance(temp_dir):
    """Benchmark compaction of a log dominated by overwrites."""
    store = make_store(temp_dir, use_memory_index=True)
    for i in range(20000):
        store.set(f"key{i % 500:04d}", f"value{i}")

    size_before = store.path.stat().st_size
    start_time = time.time()
    count = store.compact()
    duration = time.time() - start_time
    size_after = store.path.stat().st_size

    print(f"\nCompacted {size_before} -> {size_after} bytes in {duration:.3f}s")

    assert count == 500
    assert size_after < size_before / 10
    store.close()
