"""
Meta Description Scorer.
"""
from pagescore.schemas.page_signals import MetaSignals
from pagescore.services.scoring.base import CategoryScorer
from pagescore.services.scoring.models import CategoryScoreResult, MetaDescriptionMetrics
from pagescore.services.scoring import text


class MetaDescriptionScorer(CategoryScorer):
    """Scores meta description presence, length, call to action and wording."""

    category = "meta_description"

    def score(self, meta: MetaSignals) -> CategoryScoreResult:
        description = meta.description.strip()
        length = meta.description_length
        issues = []
        recommendations = []
        metrics = MetaDescriptionMetrics(
            length=length,
            has_description=bool(description),
            optimal_length=120 <= length <= 160,
        )

        if not description:
            issues.append("Missing meta description")
            recommendations.append("Add a compelling meta description")
            return self._result(0, issues, recommendations, metrics)

        score = 50

        if 120 <= length <= 160:
            score += 35
        elif 100 <= length <= 170:
            score += 25
        elif length < 120:
            issues.append("Meta description is too short")
            recommendations.append("Expand the meta description to 120-160 characters")
        else:
            issues.append("Meta description is too long")
            recommendations.append("Shorten the meta description to under 160 characters")

        if text.has_call_to_action(description):
            score += 10
        else:
            recommendations.append("Consider adding a call to action")

        if text.is_descriptive(description):
            score += 5

        return self._result(score, issues, recommendations, metrics)
