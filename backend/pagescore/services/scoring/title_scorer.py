"""
Title Scorer - Evaluates the <title> tag.
"""
from pagescore.schemas.page_signals import MetaSignals
from pagescore.services.scoring.base import CategoryScorer
from pagescore.services.scoring.models import CategoryScoreResult, TitleMetrics
from pagescore.services.scoring import text


class TitleScorer(CategoryScorer):
    """Scores title presence, length, keyword variety and branding."""

    category = "title"

    def score(self, meta: MetaSignals) -> CategoryScoreResult:
        title = meta.title.strip()
        length = meta.title_length
        issues = []
        recommendations = []
        metrics = TitleMetrics(
            length=length,
            has_title=bool(title),
            optimal_length=30 <= length <= 60,
        )

        if not title:
            issues.append("Missing title tag")
            recommendations.append("Add a descriptive title tag")
            return self._result(0, issues, recommendations, metrics)

        score = 40  # Base score for having a title

        # Length (30 pts optimal / 20 pts acceptable)
        if 30 <= length <= 60:
            score += 30
        elif 20 <= length <= 70:
            score += 20
        elif length < 30:
            issues.append("Title is too short")
            recommendations.append("Expand the title to 30-60 characters")
        else:
            issues.append("Title is too long")
            recommendations.append("Shorten the title to under 60 characters")

        # Keyword variety (15 pts)
        if text.has_varied_words(title):
            score += 15
        else:
            issues.append("Title lacks keyword variety")
            recommendations.append("Include relevant, varied keywords in the title")

        # Trailing brand, e.g. "... | Brand" (10 pts)
        if text.has_brand_pattern(title):
            score += 10

        if text.has_duplicate_words(title):
            score -= 5
            issues.append("Title contains duplicate words")
            recommendations.append("Remove duplicate words from the title")

        return self._result(score, issues, recommendations, metrics)
