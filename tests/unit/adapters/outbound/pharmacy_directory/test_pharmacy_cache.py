"""Unit tests for the in-process pharmacy cache."""

import asyncio

import pytest

from app.adapters.outbound.pharmacy_directory.pharmacy_cache import (
    CacheEntry,
    PharmacyCache,
    expired_keys,
)
from app.application.dtos.pharmacy import Pharmacy


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    """Create fake clock."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Create cache with a 300 second TTL."""
    return PharmacyCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def pharmacy():
    """Create a pharmacy."""
    return Pharmacy(id="1", name="HealthFirst", phone="+1-555-123-4567")


def test_expired_keys_selects_only_expired(pharmacy):
    """Test the pure eviction selector."""
    entries = {
        "old": CacheEntry(pharmacy=pharmacy, expires_at=10.0),
        "edge": CacheEntry(pharmacy=pharmacy, expires_at=20.0),
        "fresh": CacheEntry(pharmacy=pharmacy, expires_at=30.0),
    }
    assert sorted(expired_keys(entries, now=20.0)) == ["edge", "old"]


@pytest.mark.asyncio
async def test_get_within_ttl(cache, clock, pharmacy):
    """Test a fresh entry is returned."""
    await cache.set("15551234567", pharmacy)
    clock.now += 299
    assert await cache.get("15551234567") == pharmacy


@pytest.mark.asyncio
async def test_get_after_ttl_is_miss(cache, clock, pharmacy):
    """Test an expired entry is dropped on read."""
    await cache.set("15551234567", pharmacy)
    clock.now += 300
    assert await cache.get("15551234567") is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_sweep_removes_only_expired(cache, clock, pharmacy):
    """Test the sweeper keeps live entries."""
    await cache.set("old", pharmacy)
    clock.now += 200
    await cache.set("new", pharmacy)
    clock.now += 150

    assert cache.sweep() == 1
    assert await cache.get("old") is None
    assert await cache.get("new") == pharmacy


@pytest.mark.asyncio
async def test_run_sweeper_until_cancelled(cache, clock, pharmacy):
    """Test the periodic sweeper runs and stops on cancellation."""
    await cache.set("old", pharmacy)
    clock.now += 301

    task = asyncio.create_task(cache.run_sweeper(interval_seconds=0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert len(cache) == 0
