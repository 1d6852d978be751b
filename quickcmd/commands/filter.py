"""Command and category visibility for a detection result.

A category is supported when all of these hold:
  1. project-type membership: ``'*'``, or the result's types intersect the
     declared types (aliases of declared types count as the type itself)
  2. structural conditions: requiresGit, requiresDocker and
     requiredPackageManager, ANDed
  3. the custom predicate, if any

Categories missing from the config are always supported, so user commands
filed under ad-hoc categories never disappear.
"""

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from quickcmd.commands.types import (
    DEFAULT_CATEGORY_ICON,
    CategoryDisplayInfo,
    ProjectTypeStats,
    SuggestedCategory,
    UserCommand,
)
from quickcmd.config.schema import CategoryConditions, CategoryDefinition, CommandDefinition
from quickcmd.detector.types import ProjectDetectionResult

if TYPE_CHECKING:
    from quickcmd.config.provider import ConfigProvider

logger = logging.getLogger(__name__)

# Suggestion weights
WILDCARD_CATEGORY_PRIORITY = 10
UNSCORED_TYPE_PRIORITY = 50
PACKAGE_MANAGER_SCORE_DIVISOR = 10


class CommandFilter:
    def __init__(self, provider: "ConfigProvider") -> None:
        self._provider = provider

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def is_category_supported(self, category_id: str, result: ProjectDetectionResult) -> bool:
        category = self._provider.get_category(category_id)
        if category is None:
            return True

        if not self._matches_project_types(category, result):
            return False
        if category.conditions is not None:
            return self._check_category_conditions(category.conditions, result)
        return True

    def filter_categories(self, categories: Iterable[str], result: ProjectDetectionResult) -> list[str]:
        filtered = [c for c in categories if self.is_category_supported(c, result)]
        logger.debug("Categories for %s: %s", result.types, filtered)
        return filtered

    def filter_commands(
        self,
        commands: Sequence[UserCommand],
        result: ProjectDetectionResult,
        definitions: Sequence[CommandDefinition] = (),
    ) -> list[UserCommand]:
        """Commands in supported categories, minus seeded ones whose own conditions fail.

        A stored command is matched to a definition by label, command and
        category; edited or user-added commands match nothing and only the
        category check applies.
        """
        hidden = self._unsupported_definition_keys(definitions, result)
        return [
            c
            for c in commands
            if self.is_category_supported(c.category, result) and _command_key(c) not in hidden
        ]

    def rank_categories(self, result: ProjectDetectionResult) -> list[SuggestedCategory]:
        """Supported categories with their suggestion priority, best first.

        Priority is the sum of confidences of detected types the category
        declares (flat 10 for wildcard categories), plus a tenth of the
        required package manager's score when that manager was detected.
        Ties keep config order.
        """
        ranked: list[SuggestedCategory] = []
        for category in self._provider.get_categories():
            if not self.is_category_supported(category.id, result):
                continue

            if category.is_wildcard:
                priority: float = WILDCARD_CATEGORY_PRIORITY
            else:
                priority = 0
                accepted = self._accepted_type_ids(category.supported_project_types)
                for type_id in result.types:
                    if type_id in accepted:
                        detected = result.get_project_type(type_id)
                        priority += detected.confidence if detected else UNSCORED_TYPE_PRIORITY

            required_pm = category.conditions.required_package_manager if category.conditions else None
            if required_pm:
                manager = next((m for m in result.detected_package_managers if m.id == required_pm), None)
                if manager is not None:
                    priority += manager.score / PACKAGE_MANAGER_SCORE_DIVISOR

            ranked.append(SuggestedCategory(id=category.id, priority=priority))

        return sorted(ranked, key=lambda s: s.priority, reverse=True)

    def get_suggested_categories(self, result: ProjectDetectionResult) -> list[str]:
        return [s.id for s in self.rank_categories(result)]

    def get_project_type_stats(self, result: ProjectDetectionResult) -> ProjectTypeStats:
        categories = self._provider.get_categories()
        unsupported = [
            c.display_name for c in categories if not self.is_category_supported(c.id, result)
        ]
        return ProjectTypeStats(
            total_categories=len(categories),
            supported_categories=len(categories) - len(unsupported),
            unsupported_categories=unsupported,
        )

    def get_category_display_info(self, category_id: str) -> CategoryDisplayInfo:
        """Configured name and icon, or a capitalised id for unknown categories."""
        category = self._provider.get_category(category_id)
        if category is not None:
            return CategoryDisplayInfo(display_name=category.display_name, icon=category.icon)
        return CategoryDisplayInfo(display_name=category_id[:1].upper() + category_id[1:], icon=DEFAULT_CATEGORY_ICON)

    def has_custom_mapping(self, category_id: str) -> bool:
        return self._provider.get_category(category_id) is not None

    # ------------------------------------------------------------------
    # Command definitions from config
    # ------------------------------------------------------------------

    def filter_command_definitions(
        self,
        definitions: Sequence[CommandDefinition],
        result: ProjectDetectionResult,
    ) -> list[CommandDefinition]:
        return [d for d in definitions if self._is_definition_supported(d, result)]

    def _unsupported_definition_keys(
        self,
        definitions: Sequence[CommandDefinition],
        result: ProjectDetectionResult,
    ) -> set[tuple[str, str, str]]:
        supported: set[tuple[str, str, str]] = set()
        unsupported: set[tuple[str, str, str]] = set()
        for definition in definitions:
            if definition.conditions is None or self._is_definition_supported(definition, result):
                supported.add(_command_key(definition))
            else:
                unsupported.add(_command_key(definition))
        # a key also declared without failing conditions stays visible
        return unsupported - supported

    def _is_definition_supported(self, definition: CommandDefinition, result: ProjectDetectionResult) -> bool:
        conditions = definition.conditions
        if conditions is None:
            return True

        if conditions.requires_project_type:
            accepted = self._accepted_type_ids(conditions.requires_project_type)
            if not any(t in accepted for t in result.types):
                return False
        if conditions.requires_package_manager and not _has_package_manager(
            result, conditions.requires_package_manager
        ):
            return False
        if conditions.requires_git and not result.has_git:
            return False
        if conditions.requires_docker and not result.has_docker:
            return False
        if conditions.custom:
            return self.check_custom_condition(conditions.custom, result)
        return True

    # ------------------------------------------------------------------
    # Conditions
    # ------------------------------------------------------------------

    def _matches_project_types(self, category: CategoryDefinition, result: ProjectDetectionResult) -> bool:
        if category.is_wildcard:
            return True
        accepted = self._accepted_type_ids(category.supported_project_types)
        return any(type_id in accepted for type_id in result.types)

    def _accepted_type_ids(self, declared: Iterable[str]) -> set[str]:
        """Declared ids plus the canonical id and aliases of each declared type."""
        accepted: set[str] = set()
        for type_id in declared:
            accepted.add(type_id)
            definition = self._provider.get_project_type(type_id)
            if definition is not None:
                accepted.add(definition.id)
                accepted.update(definition.aliases)
        return accepted

    def _check_category_conditions(self, conditions: CategoryConditions, result: ProjectDetectionResult) -> bool:
        if conditions.requires_git and not result.has_git:
            return False
        if conditions.requires_docker and not result.has_docker:
            return False
        if conditions.required_package_manager and not _has_package_manager(
            result, conditions.required_package_manager
        ):
            return False
        if conditions.custom:
            return self.check_custom_condition(conditions.custom, result)
        return True

    def check_custom_condition(self, condition: str, result: ProjectDetectionResult) -> bool:
        """Evaluate ``kind:argument``. Unknown kinds and bad arguments pass."""
        kind, sep, argument = condition.partition(":")
        if not sep:
            logger.warning("Unknown custom condition: %s", condition)
            return True

        argument = argument.strip()
        if kind == "hasProjectType":
            return argument in result.types
        if kind == "hasPackageManager":
            return any(m.id == argument for m in result.detected_package_managers)
        if kind == "minConfidence":
            threshold = _parse_int(argument)
            if threshold is None:
                logger.warning("Invalid minConfidence value in condition %s", condition)
                return True
            return any(t.confidence >= threshold for t in result.detected_project_types)

        logger.warning("Unknown custom condition: %s", condition)
        return True


def _command_key(command) -> tuple[str, str, str]:
    return (command.label, command.command, command.category)


def _has_package_manager(result: ProjectDetectionResult, manager_id: str) -> bool:
    return (
        result.package_manager == manager_id
        or result.python_manager == manager_id
        or any(m.id == manager_id for m in result.detected_package_managers)
    )


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None
