"""Unit tests for the readers-writer lock."""

import threading
import time

import pytest

from kvlog.components.lock import ReadWriteLock


def test_readers_share_the_lock():
    """Test that several readers can hold the lock at once."""
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=5)

    def reader():
        with lock.read():
            inside.wait()  # only passes if all three hold the lock together

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert not any(t.is_alive() for t in threads)


def test_writer_excludes_readers():
    """Test that a reader waits while a writer holds the lock."""
    lock = ReadWriteLock()
    events = []

    lock.acquire_write()

    def reader():
        with lock.read():
            events.append("read")

    t = threading.Thread(target=reader)
    t.start()
    time.sleep(0.05)
    events.append("write-done")
    lock.release_write()
    t.join(timeout=5)

    assert events == ["write-done", "read"]


def test_writer_waits_for_readers():
    """Test that a writer waits until active readers release."""
    lock = ReadWriteLock()
    events = []

    lock.acquire_read()

    def writer():
        with lock.write():
            events.append("write")

    t = threading.Thread(target=writer)
    t.start()
    time.sleep(0.05)
    events.append("read-done")
    lock.release_read()
    t.join(timeout=5)

    assert events == ["read-done", "write"]


def test_waiting_writer_blocks_new_readers():
    """Test writer preference: a queued writer goes before later readers."""
    lock = ReadWriteLock()
    events = []

    lock.acquire_read()

    def writer():
        with lock.write():
            events.append("write")

    def late_reader():
        with lock.read():
            events.append("late-read")

    w = threading.Thread(target=writer)
    w.start()
    time.sleep(0.05)

    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.05)

    lock.release_read()
    w.join(timeout=5)
    r.join(timeout=5)

    assert events == ["write", "late-read"]


def test_writers_are_mutually_exclusive():
    """Test that concurrent writers never overlap."""
    lock = ReadWriteLock()
    active = 0
    overlaps = 0

    def writer():
        nonlocal active, overlaps
        for _ in range(200):
            with lock.write():
                active += 1
                if active > 1:
                    overlaps += 1
                active -= 1

    threads = [threading.Thread(target=writer) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert overlaps == 0


def test_lock_released_on_exception():
    """Test context managers release the lock when the body raises."""
    lock = ReadWriteLock()

    with pytest.raises(ValueError):
        with lock.write():
            raise ValueError("boom")

    with pytest.raises(ValueError):
        with lock.read():
            raise ValueError("boom")

    # Would deadlock if either side leaked
    with lock.write():
        pass


def test_unbalanced_release_raises():
    """Test releasing a lock that is not held."""
    lock = ReadWriteLock()

    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
