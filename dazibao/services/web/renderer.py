"""
Page Renderer

Turns a configuration snapshot into the HTML page or the JSON feed.

The HTML template is plain text with two placeholders:
    ${config_json}    - the snapshot, JSON-encoded (safe inside <script>)
    ${icon_data_uri}  - the page icon as a base64 data URI
The template is re-read on every render so edits show up without a
restart.
"""

import base64
import json
from pathlib import Path
from string import Template
from typing import Any

from dazibao.common.config import ConfigurationTree, config_tree_to_dict
from dazibao.common.exceptions import RenderError
from dazibao.common.logging_setup import get_service_logger

logger = get_service_logger("web.renderer")

# Escapes applied so the JSON can be embedded in a <script> element
_SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}


def snapshot_to_json(tree: ConfigurationTree) -> dict[str, Any]:
    """JSON-ready form of a snapshot (same shape as config.json)"""
    return config_tree_to_dict(tree)


def encode_for_script(data: Any) -> str:
    """Serialize data as JSON that can be embedded in an HTML script."""
    encoded = json.dumps(data)
    for char, escape in _SCRIPT_ESCAPES.items():
        encoded = encoded.replace(char, escape)
    return encoded


class PageRenderer:
    """Renders the status page from the template file and icon"""

    def __init__(self, template_path: Path, icon_path: Path):
        self.template_path = Path(template_path)
        self.icon_path = Path(icon_path)

    def icon_data_uri(self) -> str:
        """Icon as a data URI, or "" if the icon cannot be read"""
        try:
            icon_data = self.icon_path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read icon file: {e}")
            return ""
        return "data:image/png;base64," + base64.b64encode(icon_data).decode("ascii")

    def render_html(self, tree: ConfigurationTree | None) -> str:
        """
        Render the HTML page.

        Args:
            tree: Snapshot to embed; None embeds JSON null (the page then
                  fetches /data itself)

        Raises:
            RenderError: If the template cannot be read
        """
        try:
            template_text = self.template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise RenderError(f"failed to parse template file {self.template_path}: {e}") from e

        config_json = "null" if tree is None else encode_for_script(snapshot_to_json(tree))

        return Template(template_text).safe_substitute(
            config_json=config_json,
            icon_data_uri=self.icon_data_uri(),
        )
