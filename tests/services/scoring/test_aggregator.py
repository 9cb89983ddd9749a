"""
Tests for weights, grading and weighted aggregation.
"""
from datetime import datetime, timezone

import pytest

from pagescore.services.scoring.aggregator import ScoreAggregator, calculate_grade, impact_level, score_status
from pagescore.services.scoring.base import round_half_up
from pagescore.services.scoring.models import CategoryScoreResult
from pagescore.services.scoring.weights import CATEGORIES, CATEGORY_WEIGHTS, CategoryWeights

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _result(category, score, issues=()):
    return CategoryScoreResult(
        category=category,
        score=score,
        weight=CATEGORY_WEIGHTS.of(category),
        issues=tuple(issues),
    )


def _all(score):
    return {category: _result(category, score) for category in CATEGORIES}


class TestWeights:
    def test_default_weights_sum_to_100(self):
        assert CATEGORY_WEIGHTS.total() == 100
        assert tuple(CATEGORY_WEIGHTS.as_dict()) == CATEGORIES

    def test_invalid_sum_rejected(self):
        with pytest.raises(ValueError, match="sum to 101"):
            CategoryWeights(title=21).validate()

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            CategoryWeights(title=-20, content=60).validate()

    def test_aggregator_validates_weights(self):
        with pytest.raises(ValueError):
            ScoreAggregator(CategoryWeights(title=0))


class TestGrading:
    @pytest.mark.parametrize("score,grade,status", [
        (100, "A", "Excellent"),
        (90, "A", "Excellent"),
        (89.9, "B", "Good"),
        (80, "B", "Good"),
        (70, "C", "Average"),
        (60, "D", "Below Average"),
        (59.9, "F", "Poor"),
        (0, "F", "Poor"),
    ])
    def test_bands(self, score, grade, status):
        assert calculate_grade(score) == grade
        assert score_status(score) == status

    @pytest.mark.parametrize("score,weight,level", [
        (100, 20, "critical"),
        (75, 20, "critical"),
        (50, 20, "high"),
        (50, 10, "medium"),
        (100, 3, "low"),
    ])
    def test_impact_level(self, score, weight, level):
        assert impact_level(score, weight) == level

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(54.05, 1) == 54.1


class TestScoreAggregator:
    def setup_method(self):
        self.aggregator = ScoreAggregator(clock=lambda: NOW)

    def test_uniform_scores(self):
        report = self.aggregator.aggregate(_all(80))

        assert report.overall_score == 80
        assert report.grade == "B"
        assert report.calculated_at == NOW
        assert report.max_possible_score == 100

    def test_missing_category_counts_as_zero(self):
        results = _all(100)
        del results["title"]

        report = self.aggregator.aggregate(results)

        assert report.overall_score == 80
        assert "title" not in report.category_scores
        assert report.breakdown["title"].score == 0
        assert report.breakdown["title"].status == "Poor"

    def test_unknown_category_ignored(self):
        results = _all(50)
        results["performance"] = _result("performance", 100)

        report = self.aggregator.aggregate(results)

        assert report.overall_score == 50
        assert "performance" not in report.category_scores

    def test_half_rounds_up(self):
        # 100 x 20 + 50 x 3 = 2150 -> 21.5 -> 22
        results = {"title": _result("title", 100), "social_media": _result("social_media", 50)}

        assert self.aggregator.aggregate(results).overall_score == 22

    def test_breakdown_fields(self):
        results = _all(90)
        results["content"] = _result("content", 55, issues=["Content is too short"])

        breakdown = self.aggregator.aggregate(results).breakdown["content"]

        assert breakdown.weight_percentage == 20.0
        assert breakdown.contribution_to_overall == 11.0
        assert breakdown.status == "Poor"
        assert breakdown.impact_level == "high"
        assert breakdown.issues_count == 1
        assert breakdown.recommendations_count == 0

    def test_report_is_immutable(self):
        report = self.aggregator.aggregate(_all(70))

        with pytest.raises(AttributeError):
            report.overall_score = 100
