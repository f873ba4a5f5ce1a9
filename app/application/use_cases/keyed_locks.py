"""Per-key asyncio locks."""

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLocks:
    """
    Registry of asyncio locks, one per key.

    Serializes read-modify-write pipelines that target the same conversation
    (or phone number) while letting unrelated keys proceed concurrently. A
    key's lock is dropped from the registry once nobody holds or waits on it.
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Hold the lock for a key for the duration of the context.

        Args:
            key: Lock key (e.g., conversation id)
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
