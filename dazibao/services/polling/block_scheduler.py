"""
Block Scheduler

One BlockScheduler per display block. Each tick runs every command of the
block in declared order, then commits all outputs together with the new
last_updated stamp through a single SharedConfigStore.mutate call.
"""

from dazibao.common.config import (
    Block,
    ConfigurationTree,
    GroupBlock,
    SingleBlock,
    apply_outputs,
    block_commands,
)
from dazibao.common.exceptions import ConfigError, ExecutionError
from dazibao.common.logging_setup import get_service_logger, log_command_failure
from dazibao.common.state import SharedConfigStore
from dazibao.common.timestamp import next_stamp, utc_now

from .executor import CommandExecutor

logger = get_service_logger("polling.block")

ERROR_PREFIX = "Error: "


class BlockScheduler:
    """
    Runs the ticks of one block.

    The block's commands are captured at construction; blocks are never
    added, removed or redefined while the process runs.
    """

    def __init__(
        self,
        index: int,
        block: Block,
        store: SharedConfigStore,
        executor: CommandExecutor,
    ):
        self.index = index
        self.title = block.title
        self.interval = block.interval
        self.block_type = block.type
        self.commands = block_commands(block)
        self.labels = self._labels(block)

        self._store = store
        self._executor = executor
        self._tick_count = 0

    @staticmethod
    def _labels(block: Block) -> list[str | None]:
        if isinstance(block, SingleBlock):
            return [None]
        if isinstance(block, GroupBlock):
            return [cmd.label for cmd in block.commands]
        raise ConfigError(f"unsupported block: {block!r}")

    @property
    def name(self) -> str:
        """Scheduler name used for the task and in stats"""
        return f"block-{self.index}:{self.title}"

    @property
    def tick_count(self) -> int:
        return self._tick_count

    async def run_tick(self) -> ConfigurationTree:
        """
        Execute all commands of the block and commit the results.

        Returns:
            Snapshot of the tree as committed by this tick
        """
        outputs = []
        for command, label in zip(self.commands, self.labels):
            outputs.append(await self._execute(command, label))

        committed = await self._store.mutate(lambda tree: self._commit(tree, outputs))
        self._tick_count += 1

        logger.debug(
            f"Block '{self.title}' updated ({len(outputs)} outputs)",
            extra={"block": self.title, "tick": self._tick_count},
        )
        return committed

    async def _execute(self, command: str, label: str | None) -> str:
        """Run one command, mapping failures to error text"""
        try:
            return await self._executor.execute(command)
        except ExecutionError as e:
            log_command_failure(logger, self.title, command, e, label)
            return f"{ERROR_PREFIX}{e}"

    def _commit(self, tree: ConfigurationTree, outputs: list[str]) -> None:
        """Write one tick's results into the store's working copy"""
        block = tree.blocks[self.index]
        apply_outputs(block, outputs)

        stamp = next_stamp(block.last_updated, utc_now())
        block.last_updated = stamp
        tree.last_updated = next_stamp(tree.last_updated, stamp)
