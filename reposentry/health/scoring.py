"""Deterministic category scoring and weighted aggregation.

Nothing in this module performs I/O or talks to the generation backend, so
the overall score is a pure function of the category results.
"""

import math
from collections.abc import Iterable, Mapping

from reposentry.health.models import CategoryResult, Grade

# Security and Testing weigh more because they directly affect production
# readiness. Unknown categories fall back to DEFAULT_WEIGHT.
DEFAULT_WEIGHTS: dict[str, float] = {
    "Security": 2.0,
    "Testing": 1.5,
    "CI/CD": 1.2,
    "Performance": 1.2,
    "Documentation": 1.0,
    "Architecture": 1.0,
    "Collaboration": 0.8,
}

DEFAULT_WEIGHT = 1.0


def letter_grade(score: float) -> Grade:
    """Map a 0-100 score onto the letter grade scale."""
    return Grade.from_score(score)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


def clamp_score(value: float) -> int:
    """Round a raw score and clamp it to the 0-100 range."""
    return max(0, min(100, round_half_up(value)))


def category_weight(name: str, weights: Mapping[str, float] | None = None) -> float:
    """Get the aggregation weight for a category name.

    Entries in ``weights`` override DEFAULT_WEIGHTS one category at a time;
    categories they do not mention keep their default weight.
    """
    if weights and name in weights:
        return weights[name]
    return DEFAULT_WEIGHTS.get(name, DEFAULT_WEIGHT)


def overall_score(
    categories: Iterable[CategoryResult],
    weights: Mapping[str, float] | None = None,
) -> int:
    """Combine category scores into one weighted overall score.

    Args:
        categories: Category results to combine
        weights: Optional per-category overrides merged onto DEFAULT_WEIGHTS

    Returns:
        round(sum(score * weight) / sum(weight)), or 0 for no categories
    """
    total = 0.0
    total_weight = 0.0
    for category in categories:
        weight = category_weight(category.name, weights)
        total += category.score * weight
        total_weight += weight

    if total_weight <= 0:
        return 0
    return round_half_up(total / total_weight)
