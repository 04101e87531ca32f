"""
Config Service - Configuration Persistence

Responsibilities:
- Load config.json (or write the default blocks on first run)
- Validate block definitions
- Persist the whole tree after every committed tick
"""

from .storage import ConfigStorage
from .validator import ConfigValidator

__all__ = ["ConfigStorage", "ConfigValidator"]
