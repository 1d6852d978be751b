"""Strategy selector: narrow ranked project-type scores to the detected set."""

import logging

from quickcmd.detector.types import DetectionStrategy, ProjectTypeScore

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 50
BALANCED_MEAN_RATIO = 0.8


def rank(scores: list[ProjectTypeScore]) -> list[ProjectTypeScore]:
    """Positive scores only, ordered by priority then score, both descending."""
    positive = [s for s in scores if s.score > 0]
    return sorted(positive, key=lambda s: (s.priority, s.score), reverse=True)


def select_project_types(
    scores: list[ProjectTypeScore],
    strategy: DetectionStrategy = DetectionStrategy.BALANCED,
    min_score: int = DEFAULT_MIN_SCORE,
) -> list[ProjectTypeScore]:
    """Apply the score floor, then the strategy.

    - aggressive: every survivor
    - conservative: the top-ranked survivor only
    - balanced: survivors scoring at least 80% of the survivors' mean
    """
    survivors = [s for s in rank(scores) if s.score >= min_score]
    if not survivors:
        return []

    strategy = DetectionStrategy(strategy)
    if strategy == DetectionStrategy.AGGRESSIVE:
        selected = survivors
    elif strategy == DetectionStrategy.CONSERVATIVE:
        selected = survivors[:1]
    else:
        mean = sum(s.score for s in survivors) / len(survivors)
        selected = [s for s in survivors if s.score >= BALANCED_MEAN_RATIO * mean]

    logger.debug(
        "Strategy %s kept %s of %s",
        strategy.value, [s.id for s in selected], [s.id for s in survivors],
    )
    return selected
