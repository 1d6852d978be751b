"""Package-manager resolution for detected project types.

Package managers have no required gating: every manager whose rules sum to
a positive score is reported. Only one manager is promoted to the
convenience fields, the single highest-scoring one across all detected
types, and only when it belongs to the JS or Python family.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from quickcmd.config.schema import PackageManagerDefinition, ProjectTypeDefinition
from quickcmd.detector.rules import evaluate_rule
from quickcmd.detector.scorer import sum_scores
from quickcmd.detector.types import DetectedPackageManager, RuleEvaluation

if TYPE_CHECKING:
    from quickcmd.config.provider import ConfigProvider

logger = logging.getLogger(__name__)

JS_PACKAGE_MANAGERS = frozenset({"npm", "yarn", "pnpm", "bun"})
PYTHON_PACKAGE_MANAGERS = frozenset({"pip", "conda", "poetry"})


def build_detected_managers(
    definition: ProjectTypeDefinition,
    evaluations: list[list[RuleEvaluation]],
) -> list[DetectedPackageManager]:
    """Turn per-manager rule evaluations into detected managers (score > 0)."""
    detected: list[DetectedPackageManager] = []
    for manager, manager_evals in zip(definition.package_managers, evaluations):
        score = sum_scores(manager.detection_rules, manager_evals)
        if score > 0:
            detected.append(_detected(manager, definition.id, score))
    return detected


def resolve_package_managers(
    definition: ProjectTypeDefinition,
    workspace_root: Path,
    provider: Optional["ConfigProvider"] = None,
) -> list[DetectedPackageManager]:
    """Evaluate every package manager declared by ``definition``."""
    evaluations = [
        [evaluate_rule(rule, workspace_root, provider) for rule in manager.detection_rules]
        for manager in definition.package_managers
    ]
    return build_detected_managers(definition, evaluations)


def pick_primary_managers(
    managers: list[DetectedPackageManager],
) -> tuple[Optional[str], Optional[str]]:
    """Return ``(package_manager, python_manager)``.

    The winner is the first manager holding the highest score. At most one
    of the two fields is set; a winner outside both families sets neither.
    """
    if not managers:
        return None, None

    best = _pick_best(managers)
    if best.id in JS_PACKAGE_MANAGERS:
        return best.id, None
    if best.id in PYTHON_PACKAGE_MANAGERS:
        return None, best.id
    logger.debug("Top package manager %s is neither JS nor Python", best.id)
    return None, None


def _pick_best(managers: list[DetectedPackageManager]) -> DetectedPackageManager:
    best = managers[0]
    for manager in managers[1:]:
        if manager.score > best.score:
            best = manager
    return best


def _detected(manager: PackageManagerDefinition, project_type: str, score: int) -> DetectedPackageManager:
    return DetectedPackageManager(
        id=manager.id,
        display_name=manager.display_name,
        project_type=project_type,
        score=score,
    )
