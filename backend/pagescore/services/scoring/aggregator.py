"""
Score Aggregator - Combines category scores into the overall report.

overall = round(sum(score_c * weight_c) / sum(weight_c)) over every configured
category. A category missing from the input counts as 0 but keeps its weight
in the denominator.
"""

from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from pagescore.logger import logger
from pagescore.services.scoring.base import round_half_up
from pagescore.services.scoring.models import (
    MAX_SCORE,
    CategoryBreakdown,
    CategoryScoreResult,
    OverallScoreReport,
)
from pagescore.services.scoring.weights import CATEGORY_WEIGHTS, SCORING_VERSION, CategoryWeights

Clock = Callable[[], datetime]

# (threshold, grade, status) from best to worst
_BANDS = (
    (90, "A", "Excellent"),
    (80, "B", "Good"),
    (70, "C", "Average"),
    (60, "D", "Below Average"),
)


def calculate_grade(score: float) -> str:
    for threshold, grade, _ in _BANDS:
        if score >= threshold:
            return grade
    return "F"


def score_status(score: float) -> str:
    for threshold, _, status in _BANDS:
        if score >= threshold:
            return status
    return "Poor"


def impact_level(score: float, weight: int) -> str:
    impact = score / 100 * weight
    if impact >= 15:
        return "critical"
    if impact >= 10:
        return "high"
    if impact >= 5:
        return "medium"
    return "low"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScoreAggregator:
    """Weighted aggregation over a validated weight table."""

    def __init__(
        self,
        weights: CategoryWeights = CATEGORY_WEIGHTS,
        scoring_version: str = SCORING_VERSION,
        clock: Optional[Clock] = None,
    ):
        self.weights = weights.validate()
        self.scoring_version = scoring_version
        self.clock = clock or _utcnow

    def aggregate(self, category_results: Mapping[str, CategoryScoreResult]) -> OverallScoreReport:
        weights = self.weights.as_dict()
        total_weight = sum(weights.values())

        unknown = [name for name in category_results if name not in weights]
        if unknown:
            logger.warning(f"Ignoring unweighted categories: {', '.join(unknown)}")

        weighted_sum = 0.0
        breakdown = {}
        for category, weight in weights.items():
            result = category_results.get(category)
            if result is None:
                logger.warning(f"Category '{category}' missing from results, counting it as 0")
                score = 0.0
            else:
                score = result.score
            weighted_sum += score * weight

            weight_percentage = round_half_up(weight / total_weight * 100, 1)
            breakdown[category] = CategoryBreakdown(
                score=score,
                weight_percentage=weight_percentage,
                contribution_to_overall=round_half_up(weight_percentage * score / 100, 1),
                status=score_status(score),
                impact_level=impact_level(score, weight),
                issues_count=len(result.issues) if result else 0,
                recommendations_count=len(result.recommendations) if result else 0,
            )

        overall = int(round_half_up(weighted_sum / total_weight))
        overall = min(max(overall, 0), MAX_SCORE)

        return OverallScoreReport(
            overall_score=overall,
            grade=calculate_grade(overall),
            category_scores={name: category_results[name] for name in weights if name in category_results},
            breakdown=breakdown,
            scoring_version=self.scoring_version,
            calculated_at=self.clock(),
        )
