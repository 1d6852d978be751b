"""package.json scripts for Node.js workspaces."""

import json
import logging
from pathlib import Path
from typing import Optional

from quickcmd.detector.types import ProjectScript

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_MANAGER = "npm"


def parse_package_json(workspace_root: Path) -> dict:
    """Parse package.json and return the raw dict, or {} when unusable."""
    pkg_path = workspace_root / "package.json"
    if not pkg_path.is_file():
        return {}

    try:
        data = json.loads(pkg_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Failed to parse package.json: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}


def derive_node_scripts(workspace_root: Path, package_manager: Optional[str] = None) -> list[ProjectScript]:
    """One ``<pm> run <name>`` entry per string-valued script."""
    pm = package_manager or DEFAULT_PACKAGE_MANAGER
    scripts = parse_package_json(workspace_root).get("scripts", {})
    if not isinstance(scripts, dict):
        return []

    return [
        ProjectScript(name=name, command=f"{pm} run {name}")
        for name, body in scripts.items()
        if isinstance(body, str)
    ]
