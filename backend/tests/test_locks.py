import asyncio

from venturelab.storage.locks import KeyedLock


async def test_same_key_is_serialized():
    locks = KeyedLock()
    order: list[str] = []

    async def worker(name: str):
        async with locks.hold("pair"):
            order.append(f"{name}:in")
            await asyncio.sleep(0.01)
            order.append(f"{name}:out")

    await asyncio.gather(worker("a"), worker("b"))

    assert order == ["a:in", "a:out", "b:in", "b:out"]


async def test_different_keys_run_side_by_side():
    locks = KeyedLock()
    both_inside = asyncio.Event()
    inside = 0

    async def worker(key: str):
        nonlocal inside
        async with locks.hold(key):
            inside += 1
            if inside == 2:
                both_inside.set()
            await asyncio.wait_for(both_inside.wait(), timeout=1)

    await asyncio.gather(worker("one"), worker("two"))


async def test_entries_are_dropped_once_idle():
    locks = KeyedLock()

    async with locks.hold("pair"):
        assert "pair" in locks
        assert len(locks) == 1

    assert "pair" not in locks
    assert len(locks) == 0


async def test_entry_survives_while_a_waiter_is_queued():
    locks = KeyedLock()
    release = asyncio.Event()

    async def first():
        async with locks.hold("pair"):
            await release.wait()

    async def second():
        async with locks.hold("pair"):
            pass

    tasks = [asyncio.create_task(first()), asyncio.create_task(second())]
    await asyncio.sleep(0)
    assert len(locks) == 1

    release.set()
    await asyncio.gather(*tasks)
    assert len(locks) == 0


async def test_entry_is_dropped_when_the_body_raises():
    locks = KeyedLock()

    try:
        async with locks.hold("pair"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass

    assert len(locks) == 0
