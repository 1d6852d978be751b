"""Tests for CommandManager wiring over a real workspace and in-memory store."""

import json
from pathlib import Path

import pytest

from quickcmd.commands.manager import CommandManager, create_manager


@pytest.fixture
async def manager(make_settings, node_workspace: Path) -> CommandManager:
    mgr = create_manager(make_settings(node_workspace))
    await mgr.ensure_initialized()
    return mgr


class TestInitialization:
    async def test_seeds_and_detects(self, manager: CommandManager) -> None:
        assert manager.initialized
        assert manager.current_project.types == ["nodejs"]
        assert manager.store.count() > 0
        assert "docker" in manager.get_available_categories()

    async def test_seeding_can_be_disabled(self, make_settings, node_workspace: Path) -> None:
        mgr = create_manager(make_settings(node_workspace, seed_default_commands=False))
        await mgr.initialize()
        assert mgr.get_all_commands() == []

    async def test_initialize_runs_once(self, manager: CommandManager) -> None:
        before = manager.store.count()
        await manager.ensure_initialized()
        assert manager.store.count() == before


class TestFilteredViews:
    async def test_categories_follow_project(self, manager: CommandManager) -> None:
        assert await manager.get_filtered_categories() == ["npm"]

    async def test_adhoc_category_is_kept(self, manager: CommandManager) -> None:
        manager.add_command("Deploy", "./deploy.sh", "deploy")
        assert await manager.get_filtered_categories() == ["deploy", "npm"]
        labels = [c.label for c in await manager.get_filtered_commands_by_category("deploy")]
        assert labels == ["Deploy"]

    async def test_filtered_commands(self, manager: CommandManager) -> None:
        commands = await manager.get_filtered_commands()
        assert commands
        assert {c.category for c in commands} == {"npm"}

    async def test_configured_command_conditions(self, make_settings, node_workspace: Path) -> None:
        config_dir = node_workspace / ".quickcmd"
        config_dir.mkdir()
        commands = [
            {"label": "Image", "command": "docker build .", "category": "npm", "conditions": {"requiresDocker": True}},
            {"label": "Ci", "command": "npm ci", "category": "npm", "conditions": {"requiresPackageManager": "npm"}},
        ]
        (config_dir / "config.json").write_text(json.dumps({"commands": commands}), encoding="utf-8")
        mgr = create_manager(make_settings(node_workspace))
        await mgr.ensure_initialized()

        assert {"Image", "Ci"} <= {c.label for c in mgr.get_all_commands()}
        visible = {c.label for c in await mgr.get_filtered_commands()}
        assert "Image" not in visible
        assert "Ci" in visible
        by_category = {c.label for c in await mgr.get_filtered_commands_by_category("npm")}
        assert "Image" not in by_category

        # an edited copy no longer matches its definition
        image = next(c for c in mgr.get_all_commands() if c.label == "Image")
        mgr.update_command(image.id, command="docker build -t app .")
        assert "Image" in {c.label for c in await mgr.get_filtered_commands()}

    async def test_dependency_gate(self, manager: CommandManager, node_workspace: Path) -> None:
        config_dir = node_workspace / ".quickcmd"
        config_dir.mkdir()
        (config_dir / "config.json").write_text(
            json.dumps({"dependencyChecks": {"npm": {"command": "false"}}}), encoding="utf-8"
        )
        await manager.reload_config()

        assert await manager.get_filtered_categories(check_dependencies=False) == ["npm"]
        assert await manager.get_filtered_categories(check_dependencies=True) == []

    async def test_suggestions_and_stats(self, manager: CommandManager) -> None:
        suggestions = await manager.get_suggested_categories()
        assert suggestions[0].id == "npm"
        assert suggestions[-1].id == "custom"

        stats = await manager.get_project_stats()
        assert stats.project_types == ["Node.js"]
        assert stats.package_manager == "npm"
        assert stats.to_dict()["supportedCategories"] == 2


class TestStoreOperations:
    async def test_rename_and_delete_category(self, manager: CommandManager) -> None:
        count = manager.get_category_command_count("git")
        assert manager.rename_category("git", "vcs") == count
        assert manager.get_category_command_count("vcs") == count
        assert manager.delete_category("vcs") == count
        assert "vcs" not in manager.get_available_categories()

    async def test_export_import_round_trip(self, manager: CommandManager) -> None:
        exported = manager.export_commands()
        assert manager.import_commands(exported) == 0
        assert manager.import_commands(exported[:2], replace=True) == 2
        assert len(manager.get_all_commands()) == 2
