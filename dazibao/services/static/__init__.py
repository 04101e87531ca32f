"""
Static Service - File Output

Responsibilities:
- Render the page once to a file (dry run)
- Regenerate it on a fixed interval
"""

from .generator import StaticPageGenerator

__all__ = ["StaticPageGenerator"]
