"""
Polling Service - Command Execution

Responsibilities:
- Resolve built-in %variables
- Run shell commands for each block
- Schedule every block on its own interval
- Commit each tick atomically to the shared store
"""

from .block_scheduler import BlockScheduler
from .executor import CommandExecutor
from .service import PollingService
from .variables import VariableResolver

__all__ = ["BlockScheduler", "CommandExecutor", "PollingService", "VariableResolver"]
