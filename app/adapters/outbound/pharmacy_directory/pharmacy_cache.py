"""In-process TTL cache for pharmacy directory lookups."""

import asyncio
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Optional

from app.application.dtos.pharmacy import Pharmacy
from app.infrastructure.logging.logger import logger


@dataclass(frozen=True)
class CacheEntry:
    """Cached pharmacy and its absolute expiry (monotonic seconds)."""

    pharmacy: Pharmacy
    expires_at: float


def expired_keys(entries: Mapping[str, CacheEntry], now: float) -> list[str]:
    """
    Select the keys whose entries have expired.

    Args:
        entries: Cache entries by normalized phone number
        now: Current time on the same clock as ``expires_at``

    Returns:
        Keys with ``expires_at <= now``
    """
    return [key for key, entry in entries.items() if entry.expires_at <= now]


class PharmacyCache:
    """Thread-safe TTL cache keyed by normalized phone number."""

    def __init__(
        self, ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic
    ) -> None:
        """
        Initialize cache.

        Args:
            ttl_seconds: Entry time-to-live in seconds
            clock: Time source (injectable for tests)
        """
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    async def get(self, phone_number: str) -> Optional[Pharmacy]:
        """
        Get a cached pharmacy.

        Args:
            phone_number: Normalized phone number

        Returns:
            Pharmacy, or None on a miss or an expired entry
        """
        with self._lock:
            entry = self._entries.get(phone_number)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[phone_number]
                return None
            return entry.pharmacy

    async def set(self, phone_number: str, pharmacy: Pharmacy) -> None:
        """
        Cache a pharmacy for the configured TTL.

        Args:
            phone_number: Normalized phone number
            pharmacy: Pharmacy snapshot
        """
        with self._lock:
            self._entries[phone_number] = CacheEntry(
                pharmacy=pharmacy, expires_at=self._clock() + self._ttl_seconds
            )

    def sweep(self, now: Optional[float] = None) -> int:
        """
        Remove expired entries.

        Args:
            now: Current time (defaults to the cache clock)

        Returns:
            Number of entries removed
        """
        with self._lock:
            keys = expired_keys(self._entries, self._clock() if now is None else now)
            for key in keys:
                del self._entries[key]
        if keys:
            logger.info(f"Cleared {len(keys)} expired pharmacy cache entries")
        return len(keys)

    async def run_sweeper(self, interval_seconds: float = 60) -> None:
        """
        Sweep expired entries periodically until cancelled.

        Args:
            interval_seconds: Delay between sweeps
        """
        while True:
            await asyncio.sleep(interval_seconds)
            self.sweep()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
