"""Per-key asyncio locks.

Operations on the same overlay path may suspend at file I/O, so two requests
for one path issued without awaiting each other could interleave. KeyedLock
serializes work per key while leaving different keys independent.
``hold_all`` takes every key at once for operations that span all paths.
"""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator


class KeyedLock:
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}
        # Set while hold_all is waiting or running; new holders queue behind it
        self._barrier: asyncio.Event | None = None

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        while self._barrier is not None:
            await self._barrier.wait()
        async with self._acquire(key):
            yield

    @asynccontextmanager
    async def hold_all(self) -> AsyncIterator[None]:
        """Wait for every in-flight key and keep new keys out until released."""
        while self._barrier is not None:
            await self._barrier.wait()
        barrier = asyncio.Event()
        self._barrier = barrier
        try:
            async with AsyncExitStack() as stack:
                for key in sorted(self._locks):
                    await stack.enter_async_context(self._acquire(key))
                yield
        finally:
            self._barrier = None
            barrier.set()

    @asynccontextmanager
    async def _acquire(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        # Count waiters too so the entry is not dropped while someone queues on it
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._holders[key] - 1
            if remaining:
                self._holders[key] = remaining
            else:
                del self._holders[key]
                del self._locks[key]

    def locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
