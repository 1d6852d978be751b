"""Common commands for Python workspaces.

Base commands depend on the resolved package manager. Framework entry
points (Django ``manage.py``, Flask ``app.py``) and console scripts
declared in pyproject.toml add further entries.
"""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from quickcmd.detector.types import ProjectScript

logger = logging.getLogger(__name__)

BASE_COMMANDS: dict[str, list[tuple[str, str]]] = {
    "pip": [
        ("install", "pip install -r requirements.txt"),
        ("run", "python main.py"),
        ("test", "pytest"),
    ],
    "poetry": [
        ("install", "poetry install"),
        ("run", "poetry run python main.py"),
        ("shell", "poetry shell"),
        ("test", "poetry run pytest"),
    ],
    "pipenv": [
        ("install", "pipenv install"),
        ("run", "pipenv run python main.py"),
        ("shell", "pipenv shell"),
        ("test", "pipenv run pytest"),
    ],
    "uv": [
        ("install", "uv sync"),
        ("run", "uv run python main.py"),
        ("test", "uv run pytest"),
    ],
    "conda": [
        ("install", "conda env update -f environment.yml"),
        ("run", "python main.py"),
        ("test", "pytest"),
    ],
}

DJANGO_COMMANDS = [
    ("django-run", "python manage.py runserver"),
    ("django-migrate", "python manage.py migrate"),
    ("django-shell", "python manage.py shell"),
]


def parse_pyproject(workspace_root: Path) -> dict:
    """Parse pyproject.toml and return the raw dict."""
    path = workspace_root / "pyproject.toml"
    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.error("Failed to parse pyproject.toml: %s", exc)
        return {}


def derive_python_scripts(workspace_root: Path, package_manager: Optional[str] = None) -> list[ProjectScript]:
    manager = package_manager if package_manager in BASE_COMMANDS else "pip"
    entries = list(BASE_COMMANDS[manager])

    if (workspace_root / "manage.py").is_file():
        entries.extend(DJANGO_COMMANDS)
    if (workspace_root / "app.py").is_file():
        entries.append(("flask-run", "flask run"))

    entries.extend(_console_scripts(workspace_root))
    return [ProjectScript(name=name, command=command) for name, command in entries]


def _console_scripts(workspace_root: Path) -> list[tuple[str, str]]:
    data = parse_pyproject(workspace_root)
    if not data:
        return []

    entries: list[tuple[str, str]] = []
    poetry_scripts = _table(_table(data, "tool"), "poetry").get("scripts")
    if isinstance(poetry_scripts, dict):
        for name, target in poetry_scripts.items():
            if isinstance(target, str):
                entries.append((f"poetry-{name}", f"poetry run {name}"))

    project_scripts = _table(data, "project").get("scripts")
    if isinstance(project_scripts, dict):
        for name in project_scripts:
            entries.append((f"script-{name}", name))
    return entries


def _table(data: dict, key: str) -> dict:
    """The sub-table at ``key``, or {} when it is missing or not a table."""
    value = data.get(key)
    return value if isinstance(value, dict) else {}
