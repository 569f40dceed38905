"""Tests for per-key locking."""

import threading
import time

from shared.locks import KeyedLock


class TestKeyedLock:
    def test_is_reentrant(self):
        locks = KeyedLock()
        with locks.hold("order-1"):
            with locks.hold("order-1"):
                assert len(locks) == 1

    def test_lock_is_dropped_when_released(self):
        locks = KeyedLock()
        with locks.hold("order-1"):
            with locks.hold("order-2"):
                assert len(locks) == 2
        assert len(locks) == 0

    def test_same_key_serializes(self):
        locks = KeyedLock()
        inside = []
        overlaps = []

        def work():
            with locks.hold("order-1"):
                if inside:
                    overlaps.append(True)
                inside.append(True)
                time.sleep(0.01)
                inside.pop()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
        assert len(locks) == 0

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        acquired = threading.Event()

        def other():
            with locks.hold("order-2"):
                acquired.set()

        with locks.hold("order-1"):
            thread = threading.Thread(target=other)
            thread.start()
            assert acquired.wait(timeout=1)
            thread.join()
