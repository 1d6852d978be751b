"""Shared test fixtures for the quickcmd test suite.

Workspaces are built in tmp_path; the command store uses in-memory SQLite,
so every test gets a fresh database.
"""

import json
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from quickcmd.config.provider import ConfigProvider
from quickcmd.core.config import Settings


def _test_settings(workspace_root, **overrides) -> Settings:
    values = {
        "workspace_root": workspace_root,
        "database_url": "sqlite:///:memory:",
        "check_dependencies": False,
        "debug": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def make_settings():
    """Factory for Settings isolated from the environment (memory DB, no tool checks)."""
    return _test_settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return _test_settings(tmp_path)


@pytest.fixture
def provider(settings: Settings) -> ConfigProvider:
    return ConfigProvider(settings)


@pytest.fixture
def node_workspace(tmp_path: Path) -> Path:
    """package.json + package-lock.json: a plain npm project."""
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "demo", "scripts": {"build": "tsc", "test": "vitest"}}),
        encoding="utf-8",
    )
    (tmp_path / "package-lock.json").write_text("{}", encoding="utf-8")
    return tmp_path


@pytest.fixture
def app(node_workspace: Path):
    """FastAPI app over the npm workspace with a fresh in-memory store."""
    from quickcmd.api.main import create_app

    return create_app(_test_settings(node_workspace))


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
