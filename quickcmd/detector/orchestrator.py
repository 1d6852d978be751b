"""Detection orchestrator: scores every configured project type for a workspace.

Detection flow:
1. Evaluate every rule of every project type concurrently (worker threads,
   bounded by ``max_concurrent_probes``); results are kept in declaration order.
2. Aggregate per type, applying the required-rule veto.
3. Narrow with the configured strategy and minimum score.
4. Resolve package managers of the selected types.
5. Derive runnable scripts per selected type and assemble the result.

The last result is cached per workspace root until ``force_refresh`` or
``clear_cache()``; the cache has no TTL.
"""

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from quickcmd.config.schema import DetectionRule, ProjectTypeDefinition
from quickcmd.detector.package_managers import build_detected_managers, pick_primary_managers
from quickcmd.detector.rules import evaluate_rule
from quickcmd.detector.scorer import aggregate, confidence
from quickcmd.detector.scripts import derive_scripts
from quickcmd.detector.strategy import select_project_types
from quickcmd.detector.types import (
    DetectedPackageManager,
    DetectedProjectType,
    ProjectDetectionResult,
    ProjectTypeScore,
    RuleEvaluation,
    UNKNOWN_PROJECT_TYPE,
    empty_result,
)

if TYPE_CHECKING:
    from quickcmd.config.provider import ConfigProvider
    from quickcmd.core.config import Settings

logger = logging.getLogger(__name__)

GIT_TYPE_ID = "git"
DOCKER_TYPE_ID = "docker"


class ProjectDetector:
    """Detects project types for one workspace root at a time."""

    def __init__(
        self,
        provider: "ConfigProvider",
        settings: "Settings",
        workspace_root: Optional[Path] = None,
    ) -> None:
        self._provider = provider
        self._settings = settings
        root = workspace_root if workspace_root is not None else settings.workspace_root
        self._workspace_root = Path(root).expanduser().resolve() if root is not None else None
        self._cache_root: Optional[Path] = None
        self._cache: Optional[ProjectDetectionResult] = None

    @property
    def workspace_root(self) -> Optional[Path]:
        return self._workspace_root

    @property
    def last_result(self) -> Optional[ProjectDetectionResult]:
        return self._cache

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def detect_project(
        self,
        force_refresh: bool = False,
        workspace_root: Optional[Path] = None,
    ) -> ProjectDetectionResult:
        root = Path(workspace_root).expanduser().resolve() if workspace_root is not None else self._workspace_root
        if root is None:
            logger.info("No workspace root, reporting unknown project")
            return empty_result()

        if not force_refresh and self._cache is not None and self._cache_root == root:
            return self._cache

        result = await self._run_detection(root)
        self._cache_root = root
        self._cache = result
        return result

    def clear_cache(self) -> None:
        self._cache_root = None
        self._cache = None

    def get_detected_types(self) -> list[str]:
        if self._cache is None:
            return [UNKNOWN_PROJECT_TYPE]
        return list(self._cache.types)

    def is_type_detected(self, type_id: str) -> bool:
        return self._cache is not None and type_id in self._cache.types

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _run_detection(self, root: Path) -> ProjectDetectionResult:
        semaphore = asyncio.Semaphore(self._settings.max_concurrent_probes)
        definitions = {d.id: d for d in self._provider.get_project_types()}

        scores = await asyncio.gather(
            *(self._score_type(definition, root, semaphore) for definition in definitions.values())
        )
        selected = select_project_types(
            list(scores),
            strategy=self._settings.detection_strategy,
            min_score=self._settings.min_detection_score,
        )

        per_type_managers = await asyncio.gather(
            *(self._resolve_managers(definitions[s.id], root, semaphore) for s in selected)
        )
        managers: list[DetectedPackageManager] = [m for group in per_type_managers for m in group]
        package_manager, python_manager = pick_primary_managers(managers)

        detected_types: list[DetectedProjectType] = []
        for score, type_managers in zip(selected, per_type_managers):
            type_pm = _best_manager_id(type_managers)
            scripts = await asyncio.to_thread(derive_scripts, definitions[score.id], root, type_pm)
            detected_types.append(
                DetectedProjectType(
                    id=score.id,
                    display_name=score.display_name,
                    score=score.score,
                    confidence=confidence(score.score, score.max_possible_score),
                    scripts=scripts,
                )
            )

        type_ids = [s.id for s in selected]
        result = ProjectDetectionResult(
            workspace_root=str(root),
            types=type_ids or [UNKNOWN_PROJECT_TYPE],
            detected_project_types=detected_types,
            detected_package_managers=managers,
            package_manager=package_manager,
            python_manager=python_manager,
            has_git=GIT_TYPE_ID in type_ids,
            has_docker=DOCKER_TYPE_ID in type_ids,
            strategy=self._settings.detection_strategy,
            detection_details=list(scores),
        )
        _log_result(result)
        return result

    async def _score_type(
        self,
        definition: ProjectTypeDefinition,
        root: Path,
        semaphore: asyncio.Semaphore,
    ) -> ProjectTypeScore:
        evaluations = await self._evaluate_all(definition.detection_rules, root, semaphore)
        return aggregate(definition, evaluations)

    async def _resolve_managers(
        self,
        definition: ProjectTypeDefinition,
        root: Path,
        semaphore: asyncio.Semaphore,
    ) -> list[DetectedPackageManager]:
        evaluations = await asyncio.gather(
            *(
                self._evaluate_all(manager.detection_rules, root, semaphore)
                for manager in definition.package_managers
            )
        )
        return build_detected_managers(definition, list(evaluations))

    async def _evaluate_all(
        self,
        rules: list[DetectionRule],
        root: Path,
        semaphore: asyncio.Semaphore,
    ) -> list[RuleEvaluation]:
        async def probe(rule: DetectionRule) -> RuleEvaluation:
            async with semaphore:
                return await asyncio.to_thread(evaluate_rule, rule, root, self._provider)

        # gather preserves argument order regardless of completion order
        return list(await asyncio.gather(*(probe(rule) for rule in rules)))


def _best_manager_id(managers: list[DetectedPackageManager]) -> Optional[str]:
    best: Optional[DetectedPackageManager] = None
    for manager in managers:
        if best is None or manager.score > best.score:
            best = manager
    return best.id if best else None


def _log_result(result: ProjectDetectionResult) -> None:
    logger.info(
        "Detection complete: root=%s types=%s package_manager=%s python_manager=%s",
        result.workspace_root,
        result.types,
        result.package_manager,
        result.python_manager,
    )
