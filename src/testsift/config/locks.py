"""Fair reader/writer lock.

Waiters are served in arrival order: a reader that arrives after a waiting
writer queues behind it, so a steady stream of readers cannot starve
writers. Consecutive readers at the head of the queue are admitted together.

The lock is not re-entrant. A thread holding it must not acquire it again.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Iterator
from contextlib import contextmanager


class _Waiter:
    __slots__ = ("writer",)

    def __init__(self, writer: bool) -> None:
        self.writer = writer


class FairReadWriteLock:
    """FIFO-fair shared/exclusive lock built on a single Condition."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._queue: deque[_Waiter] = deque()

    def acquire_read(self) -> None:
        waiter = _Waiter(writer=False)
        with self._cond:
            self._wait_turn(waiter, lambda: self._reader_may_enter(waiter))
            self._queue.remove(waiter)
            self._readers += 1
            # Readers queued directly behind may enter too
            self._cond.notify_all()

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read() without matching acquire_read()")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        waiter = _Waiter(writer=True)
        with self._cond:
            self._wait_turn(waiter, lambda: self._writer_may_enter(waiter))
            self._queue.popleft()
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write() without matching acquire_write()")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def reader_count(self) -> int:
        with self._cond:
            return self._readers

    @property
    def is_write_locked(self) -> bool:
        with self._cond:
            return self._writer

    def _wait_turn(self, waiter: _Waiter, may_enter: Callable[[], bool]) -> None:
        """Queue ``waiter`` and block until ``may_enter``. Caller holds the condition."""
        self._queue.append(waiter)
        try:
            self._cond.wait_for(may_enter)
        except BaseException:
            # An interrupted waiter must not block the ones queued behind it
            self._queue.remove(waiter)
            self._cond.notify_all()
            raise

    def _reader_may_enter(self, waiter: _Waiter) -> bool:
        if self._writer:
            return False
        for queued in self._queue:
            if queued is waiter:
                return True
            if queued.writer:
                return False
        return False

    def _writer_may_enter(self, waiter: _Waiter) -> bool:
        return (
            not self._writer
            and self._readers == 0
            and bool(self._queue)
            and self._queue[0] is waiter
        )
