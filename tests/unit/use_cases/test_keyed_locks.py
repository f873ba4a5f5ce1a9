"""Unit tests for KeyedLocks."""

import asyncio

import pytest

from app.application.use_cases.keyed_locks import KeyedLocks


@pytest.mark.asyncio
async def test_same_key_is_serialized():
    """Test that holders of one key never overlap."""
    locks = KeyedLocks()
    active = 0
    peak = 0

    async def worker():
        nonlocal active, peak
        async with locks.hold(1):
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(worker() for _ in range(5)))

    assert peak == 1


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    """Test that unrelated keys do not block each other."""
    locks = KeyedLocks()
    entered = asyncio.Event()

    async def first():
        async with locks.hold("a"):
            await asyncio.wait_for(entered.wait(), timeout=1)

    async def second():
        async with locks.hold("b"):
            entered.set()

    await asyncio.gather(first(), second())


@pytest.mark.asyncio
async def test_released_locks_are_dropped():
    """Test the registry does not grow with finished keys."""
    locks = KeyedLocks()
    async with locks.hold("a"):
        assert len(locks) == 1
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_released_on_error():
    """Test an exception inside the context still releases the key."""
    locks = KeyedLocks()
    with pytest.raises(RuntimeError):
        async with locks.hold("a"):
            raise RuntimeError("boom")

    async with locks.hold("a"):
        pass
    assert len(locks) == 0
