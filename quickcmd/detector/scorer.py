"""Project-type scorer.

A type's score is the sum of its matched rule weights. If the type
declares any required rules and none of them matched, the score is forced
to 0. Required rules are any-of: one matching required rule is enough,
which lets alternatives like ``.git`` dir / ``.git`` file both be required.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

from quickcmd.config.schema import DetectionRule, ProjectTypeDefinition
from quickcmd.detector.rules import evaluate_rule
from quickcmd.detector.types import ProjectTypeScore, RuleEvaluation

if TYPE_CHECKING:
    from quickcmd.config.provider import ConfigProvider

logger = logging.getLogger(__name__)


def aggregate(
    definition: ProjectTypeDefinition,
    evaluations: list[RuleEvaluation],
) -> ProjectTypeScore:
    """Fold rule evaluations (in declaration order) into a ProjectTypeScore."""
    total = 0
    required_declared = False
    required_matched = False

    for rule, evaluation in zip(definition.detection_rules, evaluations):
        total += evaluation.score
        if rule.required:
            required_declared = True
            required_matched = required_matched or evaluation.matched

    required_failed = required_declared and not required_matched
    if required_failed:
        total = 0

    return ProjectTypeScore(
        id=definition.id,
        display_name=definition.display_name,
        priority=definition.priority,
        score=total,
        max_possible_score=definition.max_possible_score,
        required_failed=required_failed,
        rules=list(evaluations),
    )


def sum_scores(rules: Iterable[DetectionRule], evaluations: Iterable[RuleEvaluation]) -> int:
    """Plain sum with no required gating, used for package managers."""
    return sum(evaluation.score for _, evaluation in zip(rules, evaluations))


def score_project_type(
    definition: ProjectTypeDefinition,
    workspace_root: Path,
    provider: Optional["ConfigProvider"] = None,
) -> ProjectTypeScore:
    """Evaluate every rule of ``definition`` sequentially and aggregate."""
    evaluations = [
        evaluate_rule(rule, workspace_root, provider)
        for rule in definition.detection_rules
    ]
    result = aggregate(definition, evaluations)
    logger.debug(
        "Scored %s: %d/%d (required_failed=%s)",
        definition.id, result.score, result.max_possible_score, result.required_failed,
    )
    return result


def confidence(score: int, max_possible_score: int) -> int:
    """Score as a 0-100 percentage of the maximum, rounded half up."""
    if max_possible_score <= 0:
        return 0
    # floor(score / max * 100 + 0.5) in integer arithmetic
    percent = (200 * score + max_possible_score) // (2 * max_possible_score)
    return max(0, min(100, percent))
