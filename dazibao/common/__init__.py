"""
Common Utilities

Shared modules used across all services:
- state.py - SharedConfigStore, the single consistency boundary
- config.py - Configuration dataclasses
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
- scheduler.py - Fixed interval loops
- settings.py - Runtime settings and file locations
- timestamp.py - RFC 3339 helpers
"""

from .state import SharedConfigStore
from .config import (
    Block,
    BlockType,
    ConfigurationTree,
    GroupBlock,
    GroupCommand,
    SingleBlock,
    DEFAULT_PORT,
    VARIABLE_SENTINEL,
    apply_outputs,
    block_commands,
    config_tree_to_dict,
    create_default_config,
    is_variable_reference,
    load_config_tree,
)
from .exceptions import (
    DazibaoError,
    ConfigError,
    ConfigNotFoundError,
    ExecutionError,
    PersistenceError,
    RenderError,
    StartupError,
    LockError,
)
from .logging_setup import (
    setup_logging,
    get_service_logger,
    configure_service_loggers,
    log_command_failure,
)
from .scheduler import ScheduledLoop, SchedulerGroup
from .settings import Settings, load_settings

__all__ = [
    # State
    "SharedConfigStore",
    # Config
    "Block",
    "BlockType",
    "ConfigurationTree",
    "GroupBlock",
    "GroupCommand",
    "SingleBlock",
    "DEFAULT_PORT",
    "VARIABLE_SENTINEL",
    "apply_outputs",
    "block_commands",
    "config_tree_to_dict",
    "create_default_config",
    "is_variable_reference",
    "load_config_tree",
    # Exceptions
    "DazibaoError",
    "ConfigError",
    "ConfigNotFoundError",
    "ExecutionError",
    "PersistenceError",
    "RenderError",
    "StartupError",
    "LockError",
    # Logging
    "setup_logging",
    "get_service_logger",
    "configure_service_loggers",
    "log_command_failure",
    # Scheduling
    "ScheduledLoop",
    "SchedulerGroup",
    # Settings
    "Settings",
    "load_settings",
]
