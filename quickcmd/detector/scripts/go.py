"""Go toolchain commands, plus ``cmd/`` entry points and Makefile targets."""

import logging
import re
from pathlib import Path
from typing import Optional

from quickcmd.detector.types import ProjectScript

logger = logging.getLogger(__name__)

BASE_COMMANDS = [
    ("build", "go build"),
    ("run", "go run ."),
    ("test", "go test ./..."),
    ("mod-tidy", "go mod tidy"),
    ("mod-download", "go mod download"),
    ("vet", "go vet ./..."),
    ("fmt", "go fmt ./..."),
]

MAKE_TARGET_LIMIT = 5
SKIPPED_MAKE_TARGETS = {"all", "clean", "help"}

_MAKE_TARGET = re.compile(r"^([\w-]+):", re.MULTILINE)


def parse_make_targets(makefile: Path) -> list[str]:
    """Target names in declaration order, de-duplicated."""
    try:
        text = makefile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read Makefile: %s", exc)
        return []

    return list(dict.fromkeys(_MAKE_TARGET.findall(text)))


def derive_go_scripts(workspace_root: Path, package_manager: Optional[str] = None) -> list[ProjectScript]:
    entries = list(BASE_COMMANDS)

    if (workspace_root / "main.go").is_file():
        entries.append(("run-main", "go run main.go"))

    cmd_dir = workspace_root / "cmd"
    if cmd_dir.is_dir():
        for child in sorted(cmd_dir.iterdir()):
            if child.is_dir():
                entries.append((f"run-{child.name}", f"go run ./cmd/{child.name}"))

    makefile = workspace_root / "Makefile"
    if makefile.is_file():
        entries.append(("make", "make"))
        targets = [t for t in parse_make_targets(makefile) if t not in SKIPPED_MAKE_TARGETS]
        for target in targets[:MAKE_TARGET_LIMIT]:
            entries.append((f"make-{target}", f"make {target}"))

    return [ProjectScript(name=name, command=command) for name, command in entries]
