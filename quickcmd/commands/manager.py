"""Composition root: wires config, detection, filtering, storage and tool checks.

``create_manager(settings)`` builds the default object graph. Tests and
embedders can construct ``CommandManager`` directly with their own parts.
"""

import asyncio
import logging
from typing import Any, Iterable, Optional

from quickcmd.commands.deps import DependencyChecker
from quickcmd.commands.filter import CommandFilter
from quickcmd.commands.types import (
    CategoryDisplayInfo,
    ProjectStats,
    SuggestedCategory,
    UserCommand,
)
from quickcmd.config.provider import ConfigProvider
from quickcmd.core.config import Settings, get_settings
from quickcmd.db.session import create_db_engine
from quickcmd.db.store import CommandStore
from quickcmd.detector.orchestrator import ProjectDetector
from quickcmd.detector.types import ProjectDetectionResult

logger = logging.getLogger(__name__)


class CommandManager:
    def __init__(
        self,
        settings: Settings,
        provider: ConfigProvider,
        detector: ProjectDetector,
        command_filter: CommandFilter,
        store: CommandStore,
        dependency_checker: DependencyChecker,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.detector = detector
        self.filter = command_filter
        self.store = store
        self.dependency_checker = dependency_checker
        self._current_project: Optional[ProjectDetectionResult] = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> ProjectDetectionResult:
        """Load config, seed an empty store and run a first detection."""
        self.provider.load()
        self.dependency_checker.set_checks(self.provider.get_dependency_checks())
        if self.settings.seed_default_commands:
            seeded = self.store.seed_defaults(self.provider.get_commands())
            if seeded:
                logger.info("Seeded %d default commands", seeded)
        result = await self.detect_current_project()
        self._initialized = True
        return result

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def ensure_initialized(self) -> None:
        """Run initialize() once, even when several callers race for it."""
        async with self._init_lock:
            if not self._initialized:
                await self.initialize()

    async def reload_config(self) -> ProjectDetectionResult:
        self.provider.reload()
        self.dependency_checker.set_checks(self.provider.get_dependency_checks())
        return await self.detect_current_project(force_refresh=True)

    # ------------------------------------------------------------------
    # Detection
    # ------------------------------------------------------------------

    @property
    def current_project(self) -> Optional[ProjectDetectionResult]:
        return self._current_project

    async def detect_current_project(self, force_refresh: bool = False) -> ProjectDetectionResult:
        self._current_project = await self.detector.detect_project(force_refresh=force_refresh)
        return self._current_project

    async def _project(self) -> ProjectDetectionResult:
        if self._current_project is None:
            return await self.detect_current_project()
        return self._current_project

    # ------------------------------------------------------------------
    # Filtered views
    # ------------------------------------------------------------------

    async def apply_project_filter(self, commands: Iterable[UserCommand]) -> list[UserCommand]:
        """Drop commands the current project does not support.

        Checks the category first, then the conditions of the configured
        command each stored command was seeded from.
        """
        project = await self._project()
        return self.filter.filter_commands(list(commands), project, self.provider.get_commands())

    async def get_filtered_commands(self) -> list[UserCommand]:
        return await self.apply_project_filter(self.store.get_all_commands())

    async def get_filtered_categories(self, check_dependencies: Optional[bool] = None) -> list[str]:
        """Stored categories the project supports, optionally only those whose tool is installed."""
        project = await self._project()
        categories = self.filter.filter_categories(self.store.get_available_categories(), project)

        gate = self.settings.check_dependencies if check_dependencies is None else check_dependencies
        if not gate or not categories:
            return categories

        availability = await self.dependency_checker.check_many(categories)
        return [c for c in categories if availability.get(c, False)]

    async def get_filtered_commands_by_category(self, category: str) -> list[UserCommand]:
        return await self.apply_project_filter(self.store.get_commands_by_category(category))

    async def get_suggested_categories(self) -> list[SuggestedCategory]:
        project = await self._project()
        return self.filter.rank_categories(project)

    async def get_project_stats(self) -> ProjectStats:
        project = await self._project()
        stats = self.filter.get_project_type_stats(project)
        return ProjectStats(
            total_categories=stats.total_categories,
            supported_categories=stats.supported_categories,
            unsupported_categories=stats.unsupported_categories,
            project_types=[t.display_name for t in project.detected_project_types],
            package_manager=project.package_manager,
            python_manager=project.python_manager,
            has_git=project.has_git,
            has_docker=project.has_docker,
        )

    def get_category_display_info(self, category_id: str) -> CategoryDisplayInfo:
        return self.filter.get_category_display_info(category_id)

    # ------------------------------------------------------------------
    # Store pass-throughs
    # ------------------------------------------------------------------

    def get_all_commands(self) -> list[UserCommand]:
        return self.store.get_all_commands()

    def get_command(self, command_id: int) -> UserCommand:
        return self.store.get_command(command_id)

    def get_commands_by_category(self, category: str) -> list[UserCommand]:
        return self.store.get_commands_by_category(category)

    def get_available_categories(self) -> list[str]:
        return self.store.get_available_categories()

    def add_command(
        self,
        label: str,
        command: str,
        category: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> UserCommand:
        return self.store.add_command(label, command, category, description=description, icon=icon)

    def update_command(self, command_id: int, **changes: Any) -> UserCommand:
        return self.store.update_command(command_id, **changes)

    def delete_command(self, command_id: int) -> None:
        self.store.delete_command(command_id)

    def search_commands(self, query: str) -> list[UserCommand]:
        return self.store.search_commands(query)

    def rename_category(self, old_name: str, new_name: str) -> int:
        changed = self.store.rename_category(old_name, new_name)
        self.dependency_checker.clear_category_cache(old_name)
        return changed

    def delete_category(self, category: str) -> int:
        removed = self.store.delete_category(category)
        self.dependency_checker.clear_category_cache(category)
        return removed

    def get_category_command_count(self, category: str) -> int:
        return self.store.get_category_command_count(category)

    def export_commands(self) -> list[dict]:
        return self.store.export_commands()

    def import_commands(self, items: Iterable[dict], replace: bool = False) -> int:
        return self.store.import_commands(items, replace=replace)


def create_manager(settings: Optional[Settings] = None) -> CommandManager:
    """Build the default object graph for ``settings``."""
    settings = settings or get_settings()
    provider = ConfigProvider(settings)
    engine = create_db_engine(settings.database_url)
    return CommandManager(
        settings=settings,
        provider=provider,
        detector=ProjectDetector(provider, settings),
        command_filter=CommandFilter(provider),
        store=CommandStore(engine),
        dependency_checker=DependencyChecker(settings, provider.get_dependency_checks()),
    )
