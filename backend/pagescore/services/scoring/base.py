"""
Shared plumbing for the category scorers.

Every scorer follows the same shape: start from a base score, add or subtract
bounded increments per observed condition, clamp to [0, 100], and emit one
issue/recommendation per deviation from the ideal.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from pagescore.services.scoring.models import MAX_SCORE, CategoryMetrics, CategoryScoreResult
from pagescore.services.scoring.weights import CATEGORY_WEIGHTS


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero (the built-in round() rounds them to even)."""
    exponent = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def clamp_score(score: float) -> float:
    return float(min(max(score, 0), MAX_SCORE))


class CategoryScorer:
    """Base class: subclasses set `category` and implement `score()`."""

    category: str = ""

    def __init__(self, weight: Optional[int] = None):
        self.weight = CATEGORY_WEIGHTS.of(self.category) if weight is None else weight

    def score(self, signals) -> CategoryScoreResult:
        raise NotImplementedError

    def _result(
        self,
        score: float,
        issues: Iterable[str],
        recommendations: Iterable[str],
        metrics: CategoryMetrics,
    ) -> CategoryScoreResult:
        return CategoryScoreResult(
            category=self.category,
            score=clamp_score(score),
            weight=self.weight,
            issues=tuple(issues),
            recommendations=tuple(recommendations),
            metrics=metrics,
        )
