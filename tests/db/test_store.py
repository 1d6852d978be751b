"""Tests for the SQLite-backed command store."""

import pytest

from quickcmd.config.schema import CommandDefinition
from quickcmd.db.session import create_db_engine
from quickcmd.db.store import CategoryNotFoundError, CommandNotFoundError, CommandStore


@pytest.fixture
def store() -> CommandStore:
    return CommandStore(create_db_engine("sqlite:///:memory:"))


@pytest.fixture
def populated(store: CommandStore) -> CommandStore:
    store.add_command("Status", "git status", "git", description="Working tree status")
    store.add_command("Build", "npm run build", "npm")
    store.add_command("Audit", "npm audit", "npm", icon="shield")
    return store


class TestCommands:
    def test_add_and_get(self, store: CommandStore) -> None:
        created = store.add_command("Build", "cargo build", "rust", description="Compile")
        assert created.id > 0
        assert created.created_at is not None

        fetched = store.get_command(created.id)
        assert (fetched.label, fetched.command, fetched.category) == ("Build", "cargo build", "rust")
        assert fetched.description == "Compile"

    def test_get_missing_raises(self, store: CommandStore) -> None:
        with pytest.raises(CommandNotFoundError) as exc_info:
            store.get_command(99)
        assert exc_info.value.command_id == 99

    def test_update(self, populated: CommandStore) -> None:
        original = populated.search_commands("audit")[0]
        updated = populated.update_command(original.id, command="npm audit --production", icon=None)
        assert updated.command == "npm audit --production"
        assert updated.icon is None
        assert updated.label == "Audit"

    def test_update_rejects_unknown_fields(self, populated: CommandStore) -> None:
        with pytest.raises(ValueError):
            populated.update_command(1, id=5)

    def test_update_missing_raises(self, store: CommandStore) -> None:
        with pytest.raises(CommandNotFoundError):
            store.update_command(42, label="x")

    def test_delete(self, populated: CommandStore) -> None:
        target = populated.get_all_commands()[0]
        populated.delete_command(target.id)
        assert populated.count() == 2
        with pytest.raises(CommandNotFoundError):
            populated.delete_command(target.id)


class TestQueries:
    def test_ordering(self, populated: CommandStore) -> None:
        assert [c.label for c in populated.get_all_commands()] == ["Status", "Audit", "Build"]
        assert [c.label for c in populated.get_commands_by_category("npm")] == ["Audit", "Build"]

    def test_available_categories_distinct_and_sorted(self, populated: CommandStore) -> None:
        assert populated.get_available_categories() == ["git", "npm"]

    def test_search_is_case_insensitive(self, populated: CommandStore) -> None:
        assert [c.label for c in populated.search_commands("BUILD")] == ["Build"]
        assert [c.label for c in populated.search_commands("tree")] == ["Status"]
        assert len(populated.search_commands("npm")) == 2

    def test_search_escapes_wildcards(self, store: CommandStore) -> None:
        store.add_command("Percent", "echo 100%", "misc")
        store.add_command("Plain", "echo 100", "misc")
        assert [c.label for c in store.search_commands("100%")] == ["Percent"]
        assert store.search_commands("a_b") == []

    def test_blank_search_returns_everything(self, populated: CommandStore) -> None:
        assert len(populated.search_commands("  ")) == 3

    def test_counts(self, populated: CommandStore) -> None:
        assert populated.get_category_command_count("npm") == 2
        assert populated.get_category_command_count("docker") == 0
        assert populated.count() == 3


class TestCategories:
    def test_rename(self, populated: CommandStore) -> None:
        assert populated.rename_category("npm", "node") == 2
        assert populated.get_available_categories() == ["git", "node"]

    def test_rename_missing(self, populated: CommandStore) -> None:
        with pytest.raises(CategoryNotFoundError) as exc_info:
            populated.rename_category("docker", "containers")
        assert exc_info.value.category == "docker"

    def test_delete_category(self, populated: CommandStore) -> None:
        assert populated.delete_category("npm") == 2
        assert populated.get_available_categories() == ["git"]
        with pytest.raises(CategoryNotFoundError):
            populated.delete_category("npm")


class TestBulk:
    def test_export_import(self, populated: CommandStore) -> None:
        exported = populated.export_commands()
        assert exported[0] == {
            "label": "Status",
            "command": "git status",
            "description": "Working tree status",
            "category": "git",
            "icon": None,
        }

        other = CommandStore(create_db_engine("sqlite:///:memory:"))
        assert other.import_commands(exported) == 3
        # same entries again are skipped
        assert other.import_commands(exported) == 0
        assert other.count() == 3

    def test_import_skips_rows_already_stored(self, populated: CommandStore) -> None:
        items = [
            {"label": "Build", "command": "npm run build", "category": "npm"},
            {"label": "Build", "command": "npm run build", "category": "web"},
        ]
        assert populated.import_commands(items) == 1
        assert populated.get_category_command_count("web") == 1
        assert populated.get_category_command_count("npm") == 2

    def test_import_replace(self, populated: CommandStore) -> None:
        added = populated.import_commands([{"label": "Up", "command": "docker compose up", "category": "docker"}], replace=True)
        assert added == 1
        assert populated.get_available_categories() == ["docker"]

    def test_import_requires_fields(self, store: CommandStore) -> None:
        with pytest.raises(ValueError):
            store.import_commands([{"label": "x", "command": ""}])
        assert store.count() == 0

    def test_seed_only_when_empty(self, store: CommandStore) -> None:
        definitions = [
            CommandDefinition(label="Status", command="git status", category="git"),
            CommandDefinition(label="Pull", command="git pull", category="git", icon="git-branch"),
        ]
        assert store.seed_defaults(definitions) == 2
        assert store.seed_defaults(definitions) == 0
        assert store.get_commands_by_category("git")[0].icon == "git-branch"

    def test_clear(self, populated: CommandStore) -> None:
        assert populated.clear() == 3
        assert populated.count() == 0
