"""
Web Service - Rendering Boundary

Responsibilities:
- Render the HTML status page from a snapshot
- Serve the snapshot as JSON
- Serve the page icon and a health endpoint
"""

from .renderer import PageRenderer, encode_for_script, snapshot_to_json
from .service import WebService

__all__ = ["PageRenderer", "WebService", "encode_for_script", "snapshot_to_json"]
