"""
Web Service - Status Page Server

Serves the rendered page, the JSON feed, the icon and a health endpoint.
Every response is built from one SharedConfigStore snapshot, so a block
is always shown as of a single committed tick.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Callable

from aiohttp import web

from dazibao.common.exceptions import RenderError
from dazibao.common.logging_setup import get_service_logger
from dazibao.common.state import SharedConfigStore

from .renderer import PageRenderer, snapshot_to_json

logger = get_service_logger("web")


class WebService:
    """
    Web Service

    Routes:
    - GET /                   HTML status page
    - GET /data               snapshot as JSON
    - GET /icons/dazibao.png  page icon
    - GET /health             service health and scheduler stats
    """

    def __init__(
        self,
        store: SharedConfigStore,
        renderer: PageRenderer,
        host: str = "0.0.0.0",
        port: int = 8080,
        stats_provider: Callable[[], dict] | None = None,
    ):
        self.store = store
        self.renderer = renderer
        self.host = host
        self.port = port
        self.stats_provider = stats_provider

        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None
        self._start_time = datetime.now(timezone.utc)
        self._is_running = False

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes"""
        app = web.Application()
        app.router.add_get("/", self._root_handler)
        app.router.add_get("/data", self._data_handler)
        app.router.add_get("/icons/dazibao.png", self._icon_handler)
        app.router.add_get("/health", self._health_handler)
        return app

    async def start(self) -> None:
        """Start the HTTP server"""
        self._app = self.create_app()
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()

        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        self._is_running = True

        logger.info(f"dazibao server running on http://localhost:{self.port}")

    async def stop(self) -> None:
        """Stop the HTTP server"""
        self._is_running = False
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    async def _root_handler(self, request: web.Request) -> web.Response:
        """Render the HTML page from a fresh snapshot"""
        snapshot = await self.store.snapshot()
        try:
            html = self.renderer.render_html(snapshot)
        except RenderError as e:
            logger.error(f"Error generating HTML for web request: {e}")
            return web.Response(status=500, text="Failed to generate page")

        return web.Response(text=html, content_type="text/html")

    async def _data_handler(self, request: web.Request) -> web.Response:
        """Return the snapshot as JSON"""
        snapshot = await self.store.snapshot()
        data = snapshot_to_json(snapshot)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Sending config to frontend:\n{json.dumps(data, indent=2)}")
        return web.json_response(data)

    async def _icon_handler(self, request: web.Request) -> web.StreamResponse:
        """Serve the icon file"""
        icon_path = self.renderer.icon_path
        if not icon_path.is_file():
            logger.warning(f"Icon file not found: {icon_path}")
            return web.Response(status=404, text="Icon not found")
        return web.FileResponse(icon_path)

    async def _health_handler(self, request: web.Request) -> web.Response:
        """Handle health check requests"""
        uptime = (datetime.now(timezone.utc) - self._start_time).total_seconds()

        return web.json_response({
            "status": "healthy" if self._is_running else "unhealthy",
            "service": "web",
            "uptime": int(uptime),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "store": self.store.get_stats(),
            "schedulers": self.stats_provider() if self.stats_provider else {},
        })
