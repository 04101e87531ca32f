"""
Runtime Settings

Where Dazibao keeps its files and how it runs. Defaults can be overridden
by an optional settings.yaml in the home directory, then by environment
variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .exceptions import StartupError
from .logging_setup import get_service_logger

logger = get_service_logger("settings")

SETTINGS_FILENAME = "settings.yaml"


@dataclass
class Settings:
    """Process-wide runtime settings"""
    home_dir: Path
    host: str = "0.0.0.0"
    shell: str = "bash"
    log_level: str = "INFO"
    log_format: str = "text"  # text, json

    @property
    def config_path(self) -> Path:
        return self.home_dir / "config.json"

    @property
    def template_path(self) -> Path:
        return self.home_dir / "template.html"

    @property
    def icons_dir(self) -> Path:
        return self.home_dir / "icons"

    @property
    def icon_path(self) -> Path:
        return self.icons_dir / "dazibao.png"

    @property
    def lock_path(self) -> Path:
        return self.home_dir / "dazibao.lock"

    @property
    def index_path(self) -> Path:
        return self.home_dir / "index.html"


def default_home_dir() -> Path:
    """
    Resolve the Dazibao home directory.

    Raises:
        StartupError: If the user's home directory cannot be determined
    """
    env_home = os.environ.get("DAZIBAO_HOME")
    if env_home:
        return Path(env_home).expanduser()

    try:
        return Path.home() / ".dazibao"
    except (RuntimeError, KeyError) as e:
        raise StartupError(f"Failed to get user home directory: {e}") from e


def _load_settings_file(path: Path) -> dict:
    """Load settings.yaml, returning {} if missing or unreadable"""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error parsing settings file {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings file {path}: expected a mapping")
        return {}
    return data


def load_settings(home_dir: str | Path | None = None) -> Settings:
    """
    Build Settings for this process.

    Args:
        home_dir: Explicit home directory (overrides DAZIBAO_HOME)

    Returns:
        Settings with file and environment overrides applied
    """
    home = Path(home_dir).expanduser() if home_dir else default_home_dir()
    data = _load_settings_file(home / SETTINGS_FILENAME)

    settings = Settings(
        home_dir=home,
        host=str(data.get("host", "0.0.0.0")),
        shell=str(data.get("shell", "bash")),
        log_level=str(data.get("log_level", "INFO")).upper(),
        log_format=str(data.get("log_format", "text")).lower(),
    )

    # Environment wins over the settings file
    if os.environ.get("DAZIBAO_LOG_LEVEL"):
        settings.log_level = os.environ["DAZIBAO_LOG_LEVEL"].upper()
    if os.environ.get("DAZIBAO_LOG_FORMAT"):
        settings.log_format = os.environ["DAZIBAO_LOG_FORMAT"].lower()

    return settings
