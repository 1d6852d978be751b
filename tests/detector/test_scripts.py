"""Tests for the per-ecosystem script derivers."""

import json
from pathlib import Path

import pytest

from quickcmd.config.schema import ProjectTypeDefinition
from quickcmd.detector.scripts import SCRIPT_DERIVERS, derive_scripts
from quickcmd.detector.scripts.go import derive_go_scripts, parse_make_targets
from quickcmd.detector.scripts.nodejs import derive_node_scripts, parse_package_json
from quickcmd.detector.scripts.python import derive_python_scripts
from quickcmd.detector.scripts.rust import BASE_COMMANDS as RUST_BASE_COMMANDS
from quickcmd.detector.scripts.rust import derive_rust_scripts


def _names(scripts) -> list[str]:
    return [s.name for s in scripts]


def _commands(scripts) -> dict[str, str]:
    return {s.name: s.command for s in scripts}


class TestNodeScripts:
    def test_uses_given_manager(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"scripts": {"dev": "vite", "lint": "eslint ."}}))
        scripts = derive_node_scripts(tmp_path, "yarn")
        assert _commands(scripts) == {"dev": "yarn run dev", "lint": "yarn run lint"}

    def test_defaults_to_npm(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"scripts": {"start": "node ."}}))
        assert _commands(derive_node_scripts(tmp_path)) == {"start": "npm run start"}

    def test_non_string_scripts_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"scripts": {"ok": "x", "bad": ["y"]}}))
        assert _names(derive_node_scripts(tmp_path)) == ["ok"]

    def test_invalid_package_json(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        assert parse_package_json(tmp_path) == {}
        assert derive_node_scripts(tmp_path) == []

    def test_missing_package_json(self, tmp_path: Path) -> None:
        assert derive_node_scripts(tmp_path) == []


class TestPythonScripts:
    def test_unknown_manager_falls_back_to_pip(self, tmp_path: Path) -> None:
        commands = _commands(derive_python_scripts(tmp_path, None))
        assert commands["install"] == "pip install -r requirements.txt"

    def test_poetry_base_commands(self, tmp_path: Path) -> None:
        commands = _commands(derive_python_scripts(tmp_path, "poetry"))
        assert commands["install"] == "poetry install"
        assert commands["test"] == "poetry run pytest"

    def test_flask_entry_point(self, tmp_path: Path) -> None:
        (tmp_path / "app.py").write_text("app = None\n")
        assert "flask-run" in _names(derive_python_scripts(tmp_path, "pip"))

    def test_pyproject_console_scripts(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n[project.scripts]\nmytool = "x.cli:main"\n'
            '[tool.poetry.scripts]\nserve = "x.server:run"\n'
        )
        commands = _commands(derive_python_scripts(tmp_path, "poetry"))
        assert commands["script-mytool"] == "mytool"
        assert commands["poetry-serve"] == "poetry run serve"

    def test_broken_pyproject_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project\n")
        assert _names(derive_python_scripts(tmp_path, "uv")) == ["install", "run", "test"]

    @pytest.mark.parametrize(
        "content",
        [
            "[tool.poetry]\nscripts = [\"serve\"]\n",
            "tool = 1\n",
            "[project]\nscripts = \"mytool\"\n",
            "project = [1, 2]\n",
        ],
    )
    def test_wrongly_typed_tables_are_ignored(self, tmp_path: Path, content: str) -> None:
        (tmp_path / "pyproject.toml").write_text(content)
        assert _names(derive_python_scripts(tmp_path, "pip")) == ["install", "run", "test"]


class TestRustScripts:
    def test_workspace_members(self, tmp_path: Path) -> None:
        (tmp_path / "Cargo.toml").write_text('[workspace]\nmembers = ["a", "b"]\n')
        names = _names(derive_rust_scripts(tmp_path))
        assert "workspace-build" in names and "workspace-test" in names

    def test_bin_targets(self, tmp_path: Path) -> None:
        (tmp_path / "Cargo.toml").write_text('[package]\nname = "x"\n[[bin]]\nname = "cli"\n')
        assert _commands(derive_rust_scripts(tmp_path))["run-cli"] == "cargo run --bin cli"

    def test_bin_not_an_array(self, tmp_path: Path) -> None:
        (tmp_path / "Cargo.toml").write_text('bin = "cli"\n[package]\nname = "x"\n')
        assert _names(derive_rust_scripts(tmp_path)) == [name for name, _ in RUST_BASE_COMMANDS]


class TestGoScripts:
    def test_cmd_entry_points_sorted(self, tmp_path: Path) -> None:
        (tmp_path / "main.go").write_text("package main\n")
        for name in ("worker", "api"):
            (tmp_path / "cmd" / name).mkdir(parents=True)
        names = _names(derive_go_scripts(tmp_path))
        assert names[-3:] == ["run-main", "run-api", "run-worker"]

    def test_make_targets_filtered_then_capped(self, tmp_path: Path) -> None:
        targets = ["all", "clean", "help", "build", "lint", "test", "fmt", "docker", "release"]
        (tmp_path / "Makefile").write_text("".join(f"{t}:\n\t@echo {t}\n" for t in targets))
        names = [n for n in _names(derive_go_scripts(tmp_path)) if n.startswith("make")]
        assert names == ["make", "make-build", "make-lint", "make-test", "make-fmt", "make-docker"]

    def test_parse_make_targets_dedupes(self, tmp_path: Path) -> None:
        makefile = tmp_path / "Makefile"
        makefile.write_text("build:\n\tgo build\nbuild:\n\techo again\n")
        assert parse_make_targets(makefile) == ["build"]


class TestDispatch:
    def test_alias_selects_deriver(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text(json.dumps({"scripts": {"dev": "next dev"}}))
        definition = ProjectTypeDefinition.model_validate(
            {
                "id": "nextjs",
                "displayName": "Next.js",
                "aliases": ["nodejs"],
                "detectionRules": [{"name": "pkg", "type": "file_exists", "target": "package.json", "weight": 1}],
            }
        )
        assert _commands(derive_scripts(definition, tmp_path, "pnpm")) == {"dev": "pnpm run dev"}

    def test_type_without_deriver(self, tmp_path: Path) -> None:
        definition = ProjectTypeDefinition.model_validate(
            {
                "id": "docker",
                "displayName": "Docker",
                "detectionRules": [{"name": "df", "type": "file_exists", "target": "Dockerfile", "weight": 1}],
            }
        )
        assert derive_scripts(definition, tmp_path) == []

    def test_deriver_errors_yield_no_scripts(self, tmp_path: Path, monkeypatch) -> None:
        def broken(workspace_root, package_manager):
            raise AttributeError("'list' object has no attribute 'items'")

        monkeypatch.setitem(SCRIPT_DERIVERS, "python", broken)
        definition = ProjectTypeDefinition.model_validate(
            {
                "id": "python",
                "displayName": "Python",
                "detectionRules": [{"name": "req", "type": "file_exists", "target": "requirements.txt", "weight": 1}],
            }
        )
        assert derive_scripts(definition, tmp_path) == []
