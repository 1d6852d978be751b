"""Runnable commands derived from a detected workspace.

Each ecosystem module reads its own manifest (package.json, pyproject.toml,
Cargo.toml, go.mod/Makefile) and returns ProjectScript entries. Types
without a deriver get no scripts.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from quickcmd.config.schema import ProjectTypeDefinition
from quickcmd.detector.scripts.go import derive_go_scripts
from quickcmd.detector.scripts.nodejs import derive_node_scripts
from quickcmd.detector.scripts.python import derive_python_scripts
from quickcmd.detector.scripts.rust import derive_rust_scripts
from quickcmd.detector.types import ProjectScript

logger = logging.getLogger(__name__)

ScriptDeriver = Callable[[Path, Optional[str]], list[ProjectScript]]

SCRIPT_DERIVERS: dict[str, ScriptDeriver] = {
    "nodejs": derive_node_scripts,
    "python": derive_python_scripts,
    "rust": derive_rust_scripts,
    "go": derive_go_scripts,
}


def derive_scripts(
    definition: ProjectTypeDefinition,
    workspace_root: Path,
    package_manager: Optional[str] = None,
) -> list[ProjectScript]:
    """Dispatch on the type id, falling back to its aliases."""
    deriver = SCRIPT_DERIVERS.get(definition.id)
    if deriver is None:
        deriver = next(
            (SCRIPT_DERIVERS[alias] for alias in definition.aliases if alias in SCRIPT_DERIVERS),
            None,
        )
    if deriver is None:
        return []

    try:
        return deriver(Path(workspace_root), package_manager)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Could not derive scripts for %s: %s", definition.id, exc)
        return []


__all__ = ["SCRIPT_DERIVERS", "derive_scripts"]
