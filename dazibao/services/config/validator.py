"""
Configuration Validator

Validates the raw configuration dictionary before it is turned into
dataclasses and handed to the schedulers.
"""

from typing import Any

from dazibao.common.config import BlockType
from dazibao.common.logging_setup import get_service_logger

logger = get_service_logger("config.validator")


class ConfigValidator:
    """Validates the persisted configuration"""

    def validate(self, config: dict[str, Any]) -> tuple[bool, list[str]]:
        """
        Validate configuration.

        Args:
            config: Configuration dictionary

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors: list[str] = []

        if not isinstance(config, dict):
            return False, ["Configuration must be a JSON object"]

        blocks = config.get("blocks", [])
        if blocks is None:
            blocks = []
        if not isinstance(blocks, list):
            errors.append("'blocks' must be a list")
            blocks = []

        for index, block in enumerate(blocks):
            errors.extend(self._validate_block(index, block))

        errors.extend(self._validate_page_settings(config))

        is_valid = len(errors) == 0

        if not is_valid:
            logger.warning(
                f"Config validation failed: {len(errors)} errors",
                extra={"errors": errors},
            )
        else:
            logger.debug("Config validation passed")

        return is_valid, errors

    def _validate_block(self, index: int, block: Any) -> list[str]:
        """Validate a single block entry"""
        if not isinstance(block, dict):
            return [f"Block {index}: must be an object"]

        errors = []
        name = f"Block {index} ('{block.get('title', '')}')"

        if not isinstance(block.get("title", ""), str):
            errors.append(f"{name}: title must be a string")

        interval = block.get("interval")
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            errors.append(f"{name}: interval must be a positive integer, got {interval!r}")

        colors = block.get("colors")
        if colors is not None and not isinstance(colors, dict):
            errors.append(f"{name}: colors must be an object")

        block_type = block.get("type")
        if block_type == BlockType.SINGLE.value:
            command = block.get("command")
            if not isinstance(command, str) or not command.strip():
                errors.append(f"{name}: single block requires a non-empty 'command'")
            if not isinstance(block.get("output", ""), str):
                errors.append(f"{name}: output must be a string")
            if block.get("commands"):
                errors.append(f"{name}: single block must not define 'commands'")

        elif block_type == BlockType.GROUP.value:
            commands = block.get("commands")
            if not isinstance(commands, list) or not commands:
                errors.append(f"{name}: group block requires a non-empty 'commands' list")
            else:
                for i, cmd in enumerate(commands):
                    if not isinstance(cmd, dict):
                        errors.append(f"{name}: command {i} must be an object")
                        continue
                    command = cmd.get("command")
                    if not isinstance(command, str) or not command.strip():
                        errors.append(f"{name}: command {i} requires a non-empty 'command'")
                    for key in ("label", "output"):
                        if not isinstance(cmd.get(key, ""), str):
                            errors.append(f"{name}: command {i} {key} must be a string")
            if block.get("command"):
                errors.append(f"{name}: group block must not define 'command'")

        else:
            errors.append(f"{name}: unknown type {block_type!r} (expected 'single' or 'group')")

        return errors

    def _validate_page_settings(self, config: dict[str, Any]) -> list[str]:
        """Validate top-level page settings"""
        errors = []

        port = config.get("port")
        if port is not None:
            if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
                errors.append(f"port must be an integer between 0 and 65535 (0 selects the default), got {port!r}")

        colors = config.get("colors")
        if colors is not None and not isinstance(colors, dict):
            errors.append("colors must be an object")

        return errors
