"""
Asset Bootstrap

Installs the bundled page template and icons into the home directory on
first run. Existing files are left alone so local edits survive upgrades.
"""

import shutil
from importlib import resources
from pathlib import Path

from dazibao.common.exceptions import StartupError
from dazibao.common.logging_setup import get_service_logger
from dazibao.common.settings import Settings

logger = get_service_logger("system.assets")


def bundled_assets_dir() -> Path:
    """Directory holding the template and icons shipped with the package"""
    return Path(str(resources.files("dazibao") / "assets"))


def ensure_assets(settings: Settings, source_dir: Path | None = None) -> None:
    """
    Make sure the home directory, template and icons exist.

    Args:
        settings: Runtime settings (home directory and asset paths)
        source_dir: Where to copy assets from (defaults to the bundled ones)

    Raises:
        StartupError: If the directory or assets cannot be created
    """
    source_dir = source_dir or bundled_assets_dir()

    try:
        settings.home_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StartupError(f"Failed to create {settings.home_dir} directory: {e}") from e

    if not settings.template_path.exists():
        src = source_dir / "template.html"
        logger.info(f"Copying {src} to {settings.template_path}.")
        try:
            shutil.copyfile(src, settings.template_path)
        except OSError as e:
            raise StartupError(f"Failed to write template.html to {settings.template_path}: {e}") from e

    if not settings.icons_dir.exists():
        src = source_dir / "icons"
        logger.info(f"Copying icons from {src} to {settings.icons_dir}")
        try:
            shutil.copytree(src, settings.icons_dir)
        except OSError as e:
            raise StartupError(f"Failed to copy icons directory: {e}") from e
