"""
Shared State Management

The configuration tree is the only state shared between block schedulers
and HTTP handlers. SharedConfigStore owns it and mediates every access
through one lock:

- snapshot() hands out an independent deep copy
- mutate(fn) applies fn to a working copy, swaps it in and persists the
  whole tree, all inside the same critical section

Readers therefore see either the state before a tick or the fully
committed state after it, never a block with mixed outputs.
"""

import asyncio
import copy
from typing import Callable, Protocol

from .config import ConfigurationTree
from .exceptions import PersistenceError
from .logging_setup import get_service_logger

logger = get_service_logger("state")


class TreePersister(Protocol):
    """Anything that can write a full configuration tree to durable storage"""

    def save(self, tree: ConfigurationTree) -> None:
        ...


class SharedConfigStore:
    """
    Single point of truth for the configuration/state tree.

    All methods must be awaited from the event loop that owns the store.
    """

    def __init__(self, tree: ConfigurationTree, persister: TreePersister | None = None):
        self._tree = copy.deepcopy(tree)
        self._persister = persister
        self._lock = asyncio.Lock()

        # Observability
        self._mutation_count = 0
        self._persist_failures = 0
        self._last_persist_error: str | None = None

    async def snapshot(self) -> ConfigurationTree:
        """Get a consistent, independently readable copy of the tree."""
        async with self._lock:
            return copy.deepcopy(self._tree)

    async def mutate(self, fn: Callable[[ConfigurationTree], None]) -> ConfigurationTree:
        """
        Apply a transformation to the tree, then persist it.

        fn receives a private working copy. The copy replaces the live tree
        only if fn returns normally, so a failing transformation leaves the
        tree untouched. Persistence failures are logged and do not roll back
        the in-memory commit.

        Args:
            fn: Callable that modifies the tree in place

        Returns:
            Snapshot of the committed tree
        """
        async with self._lock:
            working = copy.deepcopy(self._tree)
            fn(working)
            self._tree = working
            self._mutation_count += 1

            committed = copy.deepcopy(working)
            if self._persister is not None:
                await self._persist(committed)
            return committed

    async def _persist(self, tree: ConfigurationTree) -> None:
        """Write the tree from inside the critical section."""
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._persister.save, tree)
            self._last_persist_error = None
        except PersistenceError as e:
            self._persist_failures += 1
            self._last_persist_error = str(e)
            logger.error(
                f"Error saving config: {e}",
                extra={"persist_failures": self._persist_failures},
            )

    def get_stats(self) -> dict:
        """Get store statistics for observability."""
        return {
            "mutation_count": self._mutation_count,
            "persist_failures": self._persist_failures,
            "last_persist_error": self._last_persist_error,
        }
