"""Tests for per-key asyncio locks."""

import asyncio

import pytest

from diffstage.utils.keyed_lock import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialized():
    locks = KeyedLock()
    order: list[str] = []

    async def worker(name: str) -> None:
        async with locks.hold("p"):
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            order.append(f"{name}-end")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a-start", "a-end", "b-start", "b-end"]


@pytest.mark.asyncio
async def test_different_keys_do_not_block():
    locks = KeyedLock()
    entered = asyncio.Event()

    async def holder() -> None:
        async with locks.hold("p"):
            await asyncio.wait_for(entered.wait(), timeout=1.0)

    async def other() -> None:
        async with locks.hold("q"):
            entered.set()

    await asyncio.gather(holder(), other())
    assert entered.is_set()


@pytest.mark.asyncio
async def test_entries_are_released():
    locks = KeyedLock()

    async with locks.hold("p"):
        assert locks.locked("p")
        assert len(locks) == 1

    assert not locks.locked("p")
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_entry_released_after_exception():
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold("p"):
            raise RuntimeError("boom")

    assert len(locks) == 0


@pytest.mark.asyncio
async def test_hold_all_waits_for_held_keys_and_blocks_new_ones():
    locks = KeyedLock()
    order: list[str] = []

    async def worker(key: str) -> None:
        async with locks.hold(key):
            order.append(f"{key}-start")
            await asyncio.sleep(0.01)
            order.append(f"{key}-end")

    async def everything() -> None:
        async with locks.hold_all():
            order.append("all")

    await asyncio.gather(worker("p"), worker("q"), everything(), worker("r"))

    assert order.index("all") > order.index("p-end")
    assert order.index("all") > order.index("q-end")
    assert order.index("all") < order.index("r-start")
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_hold_all_without_keys_does_not_block():
    locks = KeyedLock()
    async with locks.hold_all():
        pass
    async with locks.hold("p"):
        assert locks.locked("p")
