"""
Dazibao Supervisor

Runs the server mode:
- Loads (or creates) the configuration and stamps the running version
- Holds the single-instance lock for the lifetime of the process
- Starts the polling service, then the web service
- Stops both and releases the lock on SIGINT/SIGTERM
"""

import asyncio
import signal

from dazibao import __version__
from dazibao.common.exceptions import StartupError
from dazibao.common.logging_setup import get_service_logger
from dazibao.common.settings import Settings
from dazibao.common.state import SharedConfigStore
from dazibao.services.config import ConfigStorage
from dazibao.services.polling import CommandExecutor, PollingService
from dazibao.services.system import InstanceLock
from dazibao.services.web import PageRenderer, WebService

logger = get_service_logger("supervisor")


class Supervisor:
    """Owns the store and services of a running server"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.storage = ConfigStorage(settings.config_path)
        self.lock = InstanceLock(settings.lock_path)

        self.store: SharedConfigStore | None = None
        self.polling: PollingService | None = None
        self.web: WebService | None = None

        self._shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """
        Start everything and block until a shutdown signal.

        Raises:
            StartupError: If the config or lock cannot be obtained
        """
        tree = self.storage.load_or_create()
        tree.version = __version__

        self.lock.acquire()
        try:
            self.store = SharedConfigStore(tree, self.storage)
            self.polling = PollingService(
                self.store, CommandExecutor(shell=self.settings.shell)
            )
            self.web = WebService(
                self.store,
                PageRenderer(self.settings.template_path, self.settings.icon_path),
                host=self.settings.host,
                port=tree.port,
                stats_provider=self.polling.get_stats,
            )

            self._setup_signal_handlers()

            await self.polling.start()
            try:
                await self.web.start()
            except OSError as e:
                raise StartupError(f"HTTP server error: {e}") from e

            await self._shutdown_event.wait()
        finally:
            await self._stop_services()
            self.lock.release()

    async def _stop_services(self) -> None:
        """Stop polling first so no tick commits after the server is gone"""
        if self.polling:
            await self.polling.stop()
        if self.web:
            await self.web.stop()
        logger.info("Shutdown complete")

    def request_shutdown(self) -> None:
        """Ask the supervisor to stop (same as receiving SIGTERM)."""
        self._shutdown_event.set()

    def _setup_signal_handlers(self) -> None:
        """Setup graceful shutdown signal handlers"""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._handle_shutdown)
            except NotImplementedError:
                # Windows doesn't support add_signal_handler
                signal.signal(sig, lambda s, f: self._handle_shutdown())

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal"""
        logger.info("Shutting down server...")
        self._shutdown_event.set()

