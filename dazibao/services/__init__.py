"""
Dazibao Services

Layered service architecture:
1. System Service - Asset bootstrap, single-instance lock
2. Config Service - JSON persistence and validation
3. Polling Service - Per-block schedulers, command execution
4. Web Service - HTML page, JSON feed, icon, health
5. Static Service - One-shot and periodic HTML generation
"""
