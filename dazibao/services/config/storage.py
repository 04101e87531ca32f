"""
Configuration Storage

Reads and writes the whole configuration tree as one JSON file.
Writes go to a temporary file first and are renamed over the target, so
a reader never sees a half-written file.
"""

import json
import os
from pathlib import Path

from dazibao.common.config import (
    ConfigurationTree,
    config_tree_to_dict,
    create_default_config,
    load_config_tree,
)
from dazibao.common.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    PersistenceError,
    StartupError,
)
from dazibao.common.logging_setup import get_service_logger

from .validator import ConfigValidator

logger = get_service_logger("config.storage")


class ConfigStorage:
    """
    JSON file persistence for the configuration tree.

    Stores:
    - Block definitions and their latest outputs
    - Page metadata (port, version, colors, last_updated)
    """

    def __init__(self, path: Path, validator: ConfigValidator | None = None):
        self.path = Path(path)
        self.validator = validator or ConfigValidator()

    def load(self) -> ConfigurationTree:
        """
        Load the configuration tree from disk.

        Raises:
            ConfigNotFoundError: If the file does not exist
            ConfigError: If the file cannot be read, parsed or validated
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigNotFoundError(str(self.path)) from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"failed to parse {self.path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"failed to read {self.path}: {e}") from e

        is_valid, errors = self.validator.validate(data)
        if not is_valid:
            raise ConfigError(f"invalid configuration in {self.path}: " + "; ".join(errors))

        tree = load_config_tree(data)
        logger.info(
            f"Loaded config from: {self.path} ({len(tree.blocks)} blocks)",
            extra={"block_count": len(tree.blocks)},
        )
        return tree

    def save(self, tree: ConfigurationTree) -> None:
        """
        Write the whole tree, replacing the previous file.

        Raises:
            PersistenceError: If serialization or the write fails
        """
        try:
            content = json.dumps(config_tree_to_dict(tree), indent=2)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"error marshalling config: {e}", str(self.path)) from e

        temp_path = self.path.with_name(f".{self.path.name}.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(
                f"error writing config file {self.path}: {e}", str(self.path)
            ) from e

        logger.debug(f"Config saved to {self.path}")

    def load_or_create(self) -> ConfigurationTree:
        """
        Load the configuration, writing the default one on first run.

        Raises:
            StartupError: If the config is invalid or the default cannot be saved
        """
        try:
            return self.load()
        except ConfigNotFoundError:
            logger.info(f"{self.path} not found, creating with default blocks.")
        except ConfigError as e:
            raise StartupError(f"Failed to load config file {self.path}: {e}") from e

        tree = create_default_config()
        try:
            self.save(tree)
        except PersistenceError as e:
            raise StartupError(f"Failed to save initial default config: {e}") from e
        return tree
