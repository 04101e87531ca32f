"""
Static Page Generation

Runs every block once and writes the rendered page to a file. With an
interval the generation repeats until SIGINT/SIGTERM; each pass starts
from the config on disk, so outputs from the previous pass are kept.
"""

import asyncio
import signal
from pathlib import Path

from dazibao import __version__
from dazibao.common.exceptions import PersistenceError
from dazibao.common.logging_setup import get_service_logger
from dazibao.common.scheduler import ScheduledLoop
from dazibao.common.settings import Settings
from dazibao.common.state import SharedConfigStore
from dazibao.services.config import ConfigStorage
from dazibao.services.polling import CommandExecutor, PollingService
from dazibao.services.web import PageRenderer

logger = get_service_logger("static")


class StaticPageGenerator:
    """Generates the status page as a standalone HTML file"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.storage = ConfigStorage(settings.config_path)
        self.renderer = PageRenderer(settings.template_path, settings.icon_path)
        self.generation_count = 0

    async def generate(self) -> str:
        """
        Load the config, run every block once and render the page.

        Raises:
            StartupError: If the config cannot be loaded or created
            RenderError: If the template cannot be read
        """
        tree = self.storage.load_or_create()
        tree.version = __version__

        store = SharedConfigStore(tree, self.storage)
        polling = PollingService(store, CommandExecutor(shell=self.settings.shell))
        snapshot = await polling.run_all_once()

        html = self.renderer.render_html(snapshot)
        self.generation_count += 1
        return html

    def write_html(self, content: str, path: Path) -> None:
        """
        Write the page to path.

        Raises:
            PersistenceError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write HTML to {path}: {e}", str(path)) from e
        logger.info(f"HTML generated and saved to {path}")

    async def generate_to(self, path: Path) -> None:
        """Generate the page and write it to path."""
        html = await self.generate()
        self.write_html(html, path)

    async def run_every(self, interval: float, output_path: Path | None = None) -> None:
        """
        Regenerate the page every interval seconds until a shutdown signal.

        Args:
            interval: Seconds between generations (must be positive)
            output_path: Destination file (defaults to index.html in the home dir)
        """
        output_path = Path(output_path) if output_path else self.settings.index_path
        shutdown_event = asyncio.Event()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, shutdown_event.set)
            except NotImplementedError:
                signal.signal(sig, lambda s, f: shutdown_event.set())

        logger.info(f"Generating {output_path} every {interval} seconds")

        scheduler = ScheduledLoop(
            interval,
            lambda: self.generate_to(output_path),
            name="static-page",
        )
        await scheduler.start()
        try:
            await shutdown_event.wait()
        finally:
            await scheduler.wait_stopped()
            logger.info(f"Stopped after {self.generation_count} generations")
