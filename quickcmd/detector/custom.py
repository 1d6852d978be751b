"""Named workspace predicates usable from ``custom`` detection rules.

The set is closed: config files refer to these by name and cannot supply
code of their own. Each predicate takes the workspace root and returns a bool.
"""

import logging
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

WorkspacePredicate = Callable[[Path], bool]

NATIVE_SOURCE_EXTENSIONS = (".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".hxx")
NATIVE_SOURCE_DIRS = ("src", "source", "cpp", "csrc", "native", "include")

# Directories never worth descending into when looking for sources.
SKIP_DIRS = {
    "node_modules", ".git", "dist", "build", ".next", "target",
    "coverage", "__pycache__", ".venv", "venv",
}


def any_file(workspace_root: Path) -> bool:
    """True when the workspace directory has at least one entry."""
    return any(workspace_root.iterdir())


def has_python_sources(workspace_root: Path) -> bool:
    """True when a ``.py`` file sits at the top level or one directory down."""
    for path in workspace_root.glob("*.py"):
        if path.is_file():
            return True
    for child in workspace_root.iterdir():
        if child.is_dir() and child.name not in SKIP_DIRS and any(child.glob("*.py")):
            return True
    return False


def has_native_sources(workspace_root: Path) -> bool:
    """True when C/C++ sources exist at the root or under common source dirs."""
    candidates = [workspace_root] + [workspace_root / name for name in NATIVE_SOURCE_DIRS]
    for base_dir in candidates:
        if not base_dir.is_dir():
            continue
        # Only the root is scanned shallowly; source dirs are walked fully.
        paths = base_dir.iterdir() if base_dir == workspace_root else base_dir.rglob("*")
        for path in paths:
            if path.is_file() and path.suffix.lower() in NATIVE_SOURCE_EXTENSIONS:
                return True
    return False


def has_ci_workflows(workspace_root: Path) -> bool:
    """True when GitHub Actions workflow files are present."""
    workflows = workspace_root / ".github" / "workflows"
    if not workflows.is_dir():
        return False
    return any(workflows.glob("*.yml")) or any(workflows.glob("*.yaml"))


CUSTOM_FUNCTIONS: dict[str, WorkspacePredicate] = {
    "any_file": any_file,
    "has_python_sources": has_python_sources,
    "has_native_sources": has_native_sources,
    "has_ci_workflows": has_ci_workflows,
}


def run_custom_function(name: str, workspace_root: Path) -> bool:
    """Run a registered predicate by name.

    Unknown names and predicate errors both count as "no match"; the error
    is logged rather than raised so one bad rule cannot abort detection.
    """
    func = CUSTOM_FUNCTIONS.get(name)
    if func is None:
        logger.warning("Custom function %s not found", name)
        return False

    try:
        return bool(func(Path(workspace_root)))
    except Exception as exc:
        logger.warning("Error executing custom function %s: %s", name, exc)
        return False
