"""
Configuration Dataclasses

Type-safe structures for the configuration/state tree: display blocks,
their commands and latest outputs, plus page-level metadata.
Persisted as JSON in ~/.dazibao/config.json.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

from .exceptions import ConfigError
from .timestamp import ZERO_TIME, format_timestamp, parse_timestamp, utc_now

DEFAULT_PORT = 8080

# Prefix marking a built-in variable reference instead of a shell command
VARIABLE_SENTINEL = "%"


class BlockType(str, Enum):
    """Supported block types"""
    SINGLE = "single"
    GROUP = "group"


@dataclass
class GroupCommand:
    """One labelled command of a group block and its latest output"""
    label: str
    command: str
    output: str = ""


@dataclass
class SingleBlock:
    """Block with exactly one unlabelled command"""
    title: str
    command: str
    interval: int
    output: str = ""
    last_updated: datetime = ZERO_TIME
    colors: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> BlockType:
        return BlockType.SINGLE


@dataclass
class GroupBlock:
    """Block with an ordered sequence of labelled commands"""
    title: str
    commands: list[GroupCommand]
    interval: int
    last_updated: datetime = ZERO_TIME
    colors: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> BlockType:
        return BlockType.GROUP


Block = Union[SingleBlock, GroupBlock]


@dataclass
class ConfigurationTree:
    """Complete configuration and latest state of every block"""
    blocks: list[Block] = field(default_factory=list)
    last_updated: datetime = ZERO_TIME
    port: int = DEFAULT_PORT
    version: str = ""
    colors: dict[str, Any] = field(default_factory=dict)


def block_commands(block: Block) -> list[str]:
    """Command strings of a block, in declared order"""
    if isinstance(block, SingleBlock):
        return [block.command]
    if isinstance(block, GroupBlock):
        return [cmd.command for cmd in block.commands]
    raise ConfigError(f"unsupported block: {block!r}")


def apply_outputs(block: Block, outputs: list[str]) -> None:
    """
    Store one tick's outputs into a block's slots.

    Args:
        block: Block to update
        outputs: One output per command, in declared order
    """
    if isinstance(block, SingleBlock):
        if len(outputs) != 1:
            raise ConfigError(f"single block '{block.title}' expects 1 output, got {len(outputs)}")
        block.output = outputs[0]
    elif isinstance(block, GroupBlock):
        if len(outputs) != len(block.commands):
            raise ConfigError(
                f"group block '{block.title}' expects {len(block.commands)} outputs, got {len(outputs)}"
            )
        for cmd, output in zip(block.commands, outputs):
            cmd.output = output
    else:
        raise ConfigError(f"unsupported block: {block!r}")


def is_variable_reference(command: str) -> bool:
    """True if the command string names a built-in variable"""
    return len(command) > 1 and command.startswith(VARIABLE_SENTINEL)


# Helper functions to convert between dicts (JSON) and dataclasses
def load_block(data: dict) -> Block:
    """Load a Block from a dictionary"""
    block_type = data.get("type")
    common = {
        "title": data.get("title", ""),
        "interval": data.get("interval", 0),
        "last_updated": parse_timestamp(data.get("last_updated")),
        "colors": dict(data.get("colors") or {}),
    }

    if block_type == BlockType.SINGLE.value:
        return SingleBlock(
            command=data.get("command", ""),
            output=data.get("output", ""),
            **common,
        )

    if block_type == BlockType.GROUP.value:
        commands = [
            GroupCommand(
                label=c.get("label", ""),
                command=c.get("command", ""),
                output=c.get("output", ""),
            )
            for c in data.get("commands") or []
        ]
        return GroupBlock(commands=commands, **common)

    raise ConfigError(f"unknown block type: {block_type!r}")


def load_config_tree(data: dict) -> ConfigurationTree:
    """Load a ConfigurationTree from a dictionary (e.g., from the JSON file)"""
    try:
        blocks = [load_block(b) for b in data.get("blocks") or []]
        last_updated = parse_timestamp(data.get("last_updated"))
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"malformed configuration: {e}") from e

    return ConfigurationTree(
        blocks=blocks,
        last_updated=last_updated,
        # Missing or zero port falls back to the default
        port=data.get("port") or DEFAULT_PORT,
        version=data.get("version", ""),
        colors=dict(data.get("colors") or {}),
    )


def block_to_dict(block: Block) -> dict[str, Any]:
    """Convert a Block to its persisted dictionary form"""
    if isinstance(block, SingleBlock):
        data: dict[str, Any] = {
            "type": BlockType.SINGLE.value,
            "title": block.title,
            "command": block.command,
            "interval": block.interval,
        }
        if block.output:
            data["output"] = block.output
    elif isinstance(block, GroupBlock):
        data = {
            "type": BlockType.GROUP.value,
            "title": block.title,
            "commands": [
                {"label": c.label, "command": c.command, "output": c.output}
                for c in block.commands
            ],
            "interval": block.interval,
        }
    else:
        raise ConfigError(f"unsupported block: {block!r}")

    data["last_updated"] = format_timestamp(block.last_updated)
    data["colors"] = dict(block.colors)
    return data


def config_tree_to_dict(tree: ConfigurationTree) -> dict[str, Any]:
    """Convert a ConfigurationTree to its persisted dictionary form"""
    return {
        "blocks": [block_to_dict(b) for b in tree.blocks],
        "last_updated": format_timestamp(tree.last_updated),
        "port": tree.port,
        "version": tree.version,
        "colors": dict(tree.colors),
    }


def create_default_config() -> ConfigurationTree:
    """Configuration written on first run when no config file exists"""
    block_colors = {
        "background": "#fff",
        "title_color": "#333",
        "title_background": "#eee",
        "title_font_size": "1.2em",
        "value_font_size": "1em",
    }

    return ConfigurationTree(
        blocks=[
            SingleBlock(
                title="Uptime",
                command="uptime",
                interval=5,
                colors=dict(block_colors),
            ),
            SingleBlock(
                title="Disk Usage",
                command="df -h",
                interval=10,
                colors=dict(block_colors),
            ),
            GroupBlock(
                title="System Info",
                commands=[
                    GroupCommand(label="Hostname", command="%hostname"),
                    GroupCommand(label="Current Time", command="%time"),
                    GroupCommand(label="Current Date", command="%date"),
                    GroupCommand(label="Username", command="%username"),
                    GroupCommand(label="IP Address", command="%ip_address"),
                ],
                interval=5,
                colors={
                    "background": "#f9f9f9",
                    "title_color": "#0056b3",
                    "title_background": "#e0f2f7",
                    "title_font_size": "1.2em",
                    "label_color": "#555",
                    "label_background": "#f0f0f0",
                    "label_font_size": "1em",
                    "value_color": "#222",
                    "value_background": "#fff",
                    "value_font_size": "1em",
                },
            ),
        ],
        last_updated=utc_now(),
        port=DEFAULT_PORT,
        colors={"page_background": "#f0f0f0"},
    )
