"""
System Service - Process Housekeeping

Responsibilities:
- Install the page template and icons on first run
- Hold the single-instance lock while the server runs
"""

from .assets import bundled_assets_dir, ensure_assets
from .lock import InstanceLock

__all__ = ["InstanceLock", "bundled_assets_dir", "ensure_assets"]
