import asyncio

from dazibao.common.state import SharedConfigStore
from dazibao.services.polling import PollingService

from conftest import make_tree, single


def test_blocks_progress_independently():
    async def scenario():
        store = SharedConfigStore(make_tree(
            single("Fast", "%seconds", interval=1),
            single("Slow", "%seconds", interval=100),
        ))
        polling = PollingService(store)
        await polling.start()
        await asyncio.sleep(2.5)
        await polling.stop()
        return polling

    polling = asyncio.run(scenario())
    fast, slow = polling.block_schedulers
    assert fast.tick_count >= 2
    assert slow.tick_count == 1


def test_slow_command_does_not_block_other_blocks():
    async def scenario():
        store = SharedConfigStore(make_tree(
            single("Sleeper", "sleep 2; echo done", interval=10),
            single("Quick", "echo quick", interval=10),
        ))
        polling = PollingService(store)
        await polling.start()
        await asyncio.sleep(0.5)
        snap = await store.snapshot()
        await polling.stop()
        return snap

    snap = asyncio.run(scenario())
    assert snap.blocks[0].output == ""
    assert snap.blocks[1].output == "quick"


def test_run_all_once_ticks_every_block():
    async def scenario():
        store = SharedConfigStore(make_tree(
            single("A", "echo a"),
            single("B", "echo b"),
        ))
        return await PollingService(store).run_all_once()

    snap = asyncio.run(scenario())
    assert [b.output for b in snap.blocks] == ["a", "b"]


def test_stats_are_keyed_by_block():
    async def scenario():
        polling = PollingService(SharedConfigStore(make_tree(single("A", "echo a", interval=50))))
        await polling.start()
        await asyncio.sleep(0.2)
        stats = polling.get_stats()
        await polling.stop()
        return stats

    stats = asyncio.run(scenario())
    assert stats["block-0:A"]["execution_count"] == 1
