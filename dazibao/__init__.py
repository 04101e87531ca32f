"""
Dazibao - self-refreshing status page

Polls user-defined shell commands and built-in variables on per-block
intervals and serves the latest results as an HTML page and JSON feed.
"""

__version__ = "0.1.0"

APP_NAME = "Dazibao"
