"""Tests for package-manager resolution over the built-in definitions."""

from pathlib import Path

import pytest

from quickcmd.config.provider import ConfigProvider
from quickcmd.detector.package_managers import pick_primary_managers, resolve_package_managers
from quickcmd.detector.types import DetectedPackageManager


def _write(root: Path, *names: str) -> Path:
    for name in names:
        (root / name).write_text("{}" if name.endswith(".json") else "", encoding="utf-8")
    return root


def _pm(pm_id: str, score: int, project_type: str = "nodejs") -> DetectedPackageManager:
    return DetectedPackageManager(id=pm_id, display_name=pm_id, project_type=project_type, score=score)


@pytest.fixture
def nodejs(provider: ConfigProvider):
    return provider.get_project_type("nodejs")


@pytest.fixture
def python(provider: ConfigProvider):
    return provider.get_project_type("python")


class TestResolveNodeManagers:
    def test_bare_package_json_defaults_to_npm(self, tmp_path: Path, nodejs) -> None:
        _write(tmp_path, "package.json")
        managers = resolve_package_managers(nodejs, tmp_path)
        assert [(m.id, m.score) for m in managers] == [("npm", 10)]

    def test_lock_file_suppresses_npm_default(self, tmp_path: Path, nodejs) -> None:
        _write(tmp_path, "package.json", "pnpm-lock.yaml")
        managers = resolve_package_managers(nodejs, tmp_path)
        assert [m.id for m in managers] == ["pnpm"]

    def test_package_manager_field(self, tmp_path: Path, nodejs) -> None:
        (tmp_path / "package.json").write_text('{"packageManager": "yarn@4.1.0"}', encoding="utf-8")
        managers = {m.id: m.score for m in resolve_package_managers(nodejs, tmp_path)}
        assert managers["yarn"] == 80
        assert managers["npm"] == 10

    def test_every_positive_manager_is_reported(self, tmp_path: Path, nodejs) -> None:
        _write(tmp_path, "package.json", "yarn.lock", "package-lock.json")
        managers = {m.id: m for m in resolve_package_managers(nodejs, tmp_path)}
        assert set(managers) == {"yarn", "npm"}
        assert managers["npm"].score == 100
        assert managers["yarn"].project_type == "nodejs"


class TestResolvePythonManagers:
    def test_poetry_from_pyproject_section(self, tmp_path: Path, python) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.poetry]\nname = "x"\n', encoding="utf-8")
        managers = {m.id: m.score for m in resolve_package_managers(python, tmp_path)}
        assert managers == {"poetry": 80}

    def test_plain_pyproject_has_no_manager(self, tmp_path: Path, python) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        assert resolve_package_managers(python, tmp_path) == []


class TestPickPrimaryManagers:
    def test_empty(self) -> None:
        assert pick_primary_managers([]) == (None, None)

    def test_js_winner(self) -> None:
        assert pick_primary_managers([_pm("npm", 10), _pm("pnpm", 100)]) == ("pnpm", None)

    def test_python_winner(self) -> None:
        managers = [_pm("npm", 10), _pm("poetry", 180, project_type="python")]
        assert pick_primary_managers(managers) == (None, "poetry")

    def test_only_the_global_winner_is_surfaced(self) -> None:
        managers = [_pm("yarn", 100), _pm("pip", 130, project_type="python")]
        assert pick_primary_managers(managers) == (None, "pip")

    def test_other_ecosystem_winner_sets_neither(self) -> None:
        managers = [_pm("npm", 10), _pm("cargo", 100, project_type="rust")]
        assert pick_primary_managers(managers) == (None, None)

    def test_ties_keep_first(self) -> None:
        assert pick_primary_managers([_pm("yarn", 100), _pm("npm", 100)]) == ("yarn", None)
