"""
Polling Service - Block Schedulers

Owns one BlockScheduler and one ScheduledLoop per configured block. Loops
run concurrently and independently: a slow command delays only the next
tick of its own block.
"""

from dazibao.common.config import ConfigurationTree
from dazibao.common.logging_setup import get_service_logger
from dazibao.common.scheduler import SchedulerGroup
from dazibao.common.state import SharedConfigStore

from .block_scheduler import BlockScheduler
from .executor import CommandExecutor

logger = get_service_logger("polling")


class PollingService:
    """
    Polling Service

    Spawns a named scheduler task per block at start and cancels them
    all at stop.
    """

    def __init__(self, store: SharedConfigStore, executor: CommandExecutor | None = None):
        self.store = store
        self.executor = executor or CommandExecutor()
        self.block_schedulers: list[BlockScheduler] = []
        self.schedulers = SchedulerGroup()
        self._running = False

    async def setup(self) -> None:
        """Create a BlockScheduler for every block of the current tree."""
        tree = await self.store.snapshot()
        self.block_schedulers = self._build_block_schedulers(tree)

    def _build_block_schedulers(self, tree: ConfigurationTree) -> list[BlockScheduler]:
        return [
            BlockScheduler(index, block, self.store, self.executor)
            for index, block in enumerate(tree.blocks)
        ]

    async def start(self) -> None:
        """Start one scheduled loop per block"""
        if self._running:
            return

        if not self.block_schedulers:
            await self.setup()

        for block_scheduler in self.block_schedulers:
            self.schedulers.add(
                block_scheduler.name,
                block_scheduler.interval,
                block_scheduler.run_tick,
            )

        await self.schedulers.start_all()
        self._running = True

        logger.info(
            f"Polling started ({len(self.block_schedulers)} blocks)",
            extra={"block_count": len(self.block_schedulers)},
        )

    async def stop(self) -> None:
        """Cancel all block loops"""
        if not self._running:
            return

        await self.schedulers.stop_all()
        self._running = False
        logger.info("Polling stopped")

    async def run_all_once(self) -> ConfigurationTree:
        """
        Run one tick of every block, in display order.

        Used for static page generation.

        Returns:
            Snapshot after the last tick
        """
        if not self.block_schedulers:
            await self.setup()

        for block_scheduler in self.block_schedulers:
            await block_scheduler.run_tick()
        return await self.store.snapshot()

    def get_stats(self) -> dict:
        """Per-block scheduler statistics"""
        return self.schedulers.get_stats()
