"""Cargo commands for Rust workspaces, including per-binary run targets."""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from quickcmd.detector.types import ProjectScript

logger = logging.getLogger(__name__)

BASE_COMMANDS = [
    ("build", "cargo build"),
    ("run", "cargo run"),
    ("test", "cargo test"),
    ("check", "cargo check"),
    ("build-release", "cargo build --release"),
    ("run-release", "cargo run --release"),
]


def parse_cargo(workspace_root: Path) -> dict:
    """Parse Cargo.toml and return the raw dict."""
    path = workspace_root / "Cargo.toml"
    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.error("Failed to parse Cargo.toml: %s", exc)
        return {}


def derive_rust_scripts(workspace_root: Path, package_manager: Optional[str] = None) -> list[ProjectScript]:
    entries = list(BASE_COMMANDS)
    data = parse_cargo(workspace_root)

    bins = data.get("bin", [])
    for target in bins if isinstance(bins, list) else []:
        name = target.get("name") if isinstance(target, dict) else None
        if name:
            entries.append((f"run-{name}", f"cargo run --bin {name}"))

    if "workspace" in data:
        entries.append(("workspace-build", "cargo build --workspace"))
        entries.append(("workspace-test", "cargo test --workspace"))

    return [ProjectScript(name=name, command=command) for name, command in entries]
