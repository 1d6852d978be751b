"""Configuration provider: built-in defaults merged with a per-workspace file.

Lookup order for the user file:
  1. ``Settings.user_config_path`` when set
  2. ``<workspace>/.quickcmd/config.json``
  3. ``<workspace>/.quickcmd/config.yaml`` / ``config.yml``

Merge rules (user over built-in):
  projectTypes / categories  matched by id, top-level fields replaced;
                             unmatched user entries appended
  commands                   appended
  dependencyChecks           merged by key

A user file that cannot be read or parsed, or that produces an invalid
merged config, is ignored with a warning.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from quickcmd.config.defaults import BUILTIN_CONFIG, FALLBACK_CONFIG
from quickcmd.config.schema import (
    CategoryDefinition,
    CommandDefinition,
    ConfigSchema,
    DependencyCheck,
    ProjectTypeDefinition,
)
from quickcmd.config.validation import validate_config
from quickcmd.core.config import Settings
from quickcmd.detector.custom import run_custom_function

logger = logging.getLogger(__name__)

USER_CONFIG_DIR = ".quickcmd"
USER_CONFIG_NAMES = ("config.json", "config.yaml", "config.yml")


class ConfigError(Exception):
    """Raised when a config file cannot be read, parsed or written."""


def read_config_file(path: Path) -> dict:
    """Read a JSON or YAML config file into a raw dict."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    try:
        if Path(path).suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def merge_configs(base: dict, user: dict) -> dict:
    """Merge a raw user config over a raw base config. Inputs are not mutated."""
    merged = copy.deepcopy(base)

    for key in ("projectTypes", "categories"):
        if user.get(key):
            merged[key] = _merge_by_id(merged.get(key, []), user[key])

    if user.get("commands"):
        merged["commands"] = list(merged.get("commands", [])) + copy.deepcopy(user["commands"])

    if user.get("dependencyChecks"):
        checks = dict(merged.get("dependencyChecks", {}))
        checks.update(copy.deepcopy(user["dependencyChecks"]))
        merged["dependencyChecks"] = checks

    if user.get("version"):
        merged["version"] = user["version"]
    return merged


def _merge_by_id(base_items: list[dict], user_items: list[dict]) -> list[dict]:
    overrides = {item.get("id"): item for item in user_items if isinstance(item, dict)}
    merged = [
        {**item, **overrides[item.get("id")]} if item.get("id") in overrides else item
        for item in base_items
    ]
    known = {item.get("id") for item in base_items}
    for item in user_items:
        if isinstance(item, dict) and item.get("id") not in known:
            merged.append(copy.deepcopy(item))
            known.add(item.get("id"))
    return merged


class ConfigProvider:
    """Loads and serves the effective configuration for one workspace."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        workspace_root: Optional[Path] = None,
        builtin: Optional[dict] = None,
    ) -> None:
        self._settings = settings or Settings()
        root = workspace_root if workspace_root is not None else self._settings.workspace_root
        self._workspace_root = Path(root) if root is not None else None
        self._builtin = builtin if builtin is not None else BUILTIN_CONFIG
        self._config: Optional[ConfigSchema] = None
        self._user_config_file: Optional[Path] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @property
    def workspace_root(self) -> Optional[Path]:
        return self._workspace_root

    @property
    def user_config_file(self) -> Optional[Path]:
        """The user file applied on the last load, if any."""
        return self._user_config_file

    def find_user_config(self) -> Optional[Path]:
        if self._settings.user_config_path is not None:
            path = Path(self._settings.user_config_path)
            return path if path.is_file() else None
        if self._workspace_root is None:
            return None
        for name in USER_CONFIG_NAMES:
            candidate = self._workspace_root / USER_CONFIG_DIR / name
            if candidate.is_file():
                return candidate
        return None

    def load(self) -> ConfigSchema:
        """Build the effective config. Never raises for bad user input."""
        self._user_config_file = None
        raw = copy.deepcopy(self._builtin)

        user_path = self.find_user_config()
        if user_path is not None:
            try:
                user_raw = read_config_file(user_path)
            except ConfigError as exc:
                logger.warning("Ignoring user config: %s", exc)
            else:
                candidate = merge_configs(raw, user_raw)
                report = validate_config(candidate)
                if report.valid:
                    self._config = report.config
                    self._user_config_file = user_path
                    logger.info("Loaded user config from %s", user_path)
                    return self._config
                logger.warning(
                    "User config %s is invalid, using built-in config: %s",
                    user_path, "; ".join(report.errors),
                )

        report = validate_config(raw)
        if report.valid:
            self._config = report.config
            return self._config

        logger.error("Built-in config is invalid: %s", "; ".join(report.errors))
        self._config = ConfigSchema.model_validate(FALLBACK_CONFIG)
        return self._config

    def reload(self) -> ConfigSchema:
        self._config = None
        return self.load()

    @property
    def config(self) -> ConfigSchema:
        if self._config is None:
            self.load()
        return self._config

    @property
    def version(self) -> str:
        return self.config.version

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_project_types(self) -> list[ProjectTypeDefinition]:
        return list(self.config.project_types)

    def get_project_type(self, type_id: str) -> Optional[ProjectTypeDefinition]:
        """Look up by id first, then by alias."""
        for definition in self.config.project_types:
            if definition.id == type_id:
                return definition
        for definition in self.config.project_types:
            if type_id in definition.aliases:
                return definition
        return None

    def get_categories(self) -> list[CategoryDefinition]:
        return list(self.config.categories)

    def get_category(self, category_id: str) -> Optional[CategoryDefinition]:
        for category in self.config.categories:
            if category.id == category_id:
                return category
        return None

    def get_commands(self) -> list[CommandDefinition]:
        return list(self.config.commands)

    def get_dependency_checks(self) -> dict[str, DependencyCheck]:
        return dict(self.config.dependency_checks)

    def execute_custom_function(self, name: str, workspace_root: Any) -> bool:
        return run_custom_function(name, Path(workspace_root))

    # ------------------------------------------------------------------
    # Template
    # ------------------------------------------------------------------

    def write_user_config_template(self, workspace_root: Optional[Path] = None, overwrite: bool = False) -> Path:
        """Write an example ``.quickcmd/config.json`` and return its path."""
        root = Path(workspace_root) if workspace_root is not None else self._workspace_root
        if root is None:
            raise ConfigError("No workspace root to write the config template into")

        path = root / USER_CONFIG_DIR / USER_CONFIG_NAMES[0]
        if path.exists() and not overwrite:
            raise ConfigError(f"{path} already exists")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(USER_CONFIG_TEMPLATE, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot write {path}: {exc}") from exc

        logger.info("Wrote config template to %s", path)
        return path


USER_CONFIG_TEMPLATE: dict = {
    "version": "1.0.0",
    "projectTypes": [
        {
            "id": "deno",
            "displayName": "Deno",
            "priority": 75,
            "detectionRules": [
                {"name": "deno-json", "type": "file_exists", "target": "deno.json", "weight": 100, "required": True},
                {"name": "deno-lock", "type": "file_exists", "target": "deno.lock", "weight": 20},
            ],
        },
    ],
    "categories": [
        {"id": "deno", "displayName": "Deno", "icon": "symbol-module", "supportedProjectTypes": ["deno"]},
    ],
    "commands": [
        {
            "label": "Deno Test",
            "command": "deno test",
            "description": "Run the Deno test runner",
            "category": "deno",
        },
    ],
    "dependencyChecks": {
        "deno": {"command": "deno --version", "description": "Deno runtime"},
    },
}
