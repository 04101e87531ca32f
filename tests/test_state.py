import asyncio

import pytest

from dazibao.common.exceptions import PersistenceError
from dazibao.common.state import SharedConfigStore

from conftest import MemoryPersister, SlowPersister, group, make_tree, single


def test_snapshot_is_independent_copy():
    async def scenario():
        store = SharedConfigStore(make_tree(single()))
        snap = await store.snapshot()
        snap.blocks[0].output = "tampered"
        return await store.snapshot()

    assert asyncio.run(scenario()).blocks[0].output == ""


def test_mutate_commits_and_persists():
    persister = MemoryPersister()

    async def scenario():
        store = SharedConfigStore(make_tree(single()), persister)
        committed = await store.mutate(lambda tree: setattr(tree.blocks[0], "output", "hi"))
        return committed, await store.snapshot()

    committed, snap = asyncio.run(scenario())
    assert committed.blocks[0].output == "hi"
    assert snap.blocks[0].output == "hi"
    assert len(persister.saved) == 1
    assert persister.saved[0].blocks[0].output == "hi"


def test_failed_mutation_leaves_tree_unchanged():
    def half_done(tree):
        tree.blocks[0].output = "partial"
        raise RuntimeError("boom")

    async def scenario():
        store = SharedConfigStore(make_tree(single()))
        with pytest.raises(RuntimeError):
            await store.mutate(half_done)
        return await store.snapshot()

    assert asyncio.run(scenario()).blocks[0].output == ""


def test_persist_failure_keeps_commit():
    persister = MemoryPersister(error=PersistenceError("disk full"))

    async def scenario():
        store = SharedConfigStore(make_tree(single()), persister)
        await store.mutate(lambda tree: setattr(tree.blocks[0], "output", "hi"))
        return store, await store.snapshot()

    store, snap = asyncio.run(scenario())
    assert snap.blocks[0].output == "hi"
    assert store.get_stats()["persist_failures"] == 1
    assert "disk full" in store.get_stats()["last_persist_error"]


def test_readers_during_persist_see_only_committed_ticks():
    persister = SlowPersister(delay=0.01)

    def write_tick(value):
        def fn(tree):
            for cmd in tree.blocks[0].commands:
                cmd.output = value
        return fn

    async def scenario():
        store = SharedConfigStore(
            make_tree(group(commands=[("A", "a"), ("B", "b"), ("C", "c")])), persister
        )
        done = asyncio.Event()
        seen = []

        async def writer():
            for i in range(1, 11):
                await store.mutate(write_tick(str(i)))
            done.set()

        async def reader():
            while not done.is_set():
                snap = await store.snapshot()
                outputs = tuple(c.output for c in snap.blocks[0].commands)
                seen.append((outputs, list(persister.written)))
                await asyncio.sleep(0.002)

        await asyncio.gather(writer(), reader(), reader())
        return seen

    seen = asyncio.run(scenario())

    assert len(seen) >= 10
    for outputs, written in seen:
        assert len(set(outputs)) == 1
        # Either the state before any tick, or a tick whose persist had completed
        assert outputs == ("", "", "") or outputs in written
    assert len(persister.written) == 10
