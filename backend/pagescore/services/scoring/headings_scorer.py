"""
Headings Scorer - Evaluates the H1-H6 outline.
"""
from pagescore.schemas.page_signals import HeadingSignals
from pagescore.services.scoring.base import CategoryScorer
from pagescore.services.scoring.models import CategoryScoreResult, HeadingsMetrics

MAX_QUALITY_BONUS = 10


class HeadingsScorer(CategoryScorer):
    """Scores H1 usage, subheading structure, heading length and level gaps."""

    category = "headings"

    def score(self, headings: HeadingSignals) -> CategoryScoreResult:
        h1_count = len(headings.h1)
        h2_count = len(headings.h2)
        h3_count = len(headings.h3)
        score = 0
        issues = []
        recommendations = []

        # H1 (40 pts for exactly one)
        if h1_count == 0:
            issues.append("Missing H1 tag")
            recommendations.append("Add an H1 tag describing the main topic")
        elif h1_count == 1:
            score += 40
        else:
            score += 20
            issues.append("Multiple H1 tags found")
            recommendations.append("Use only one H1 tag per page")

        # Subheadings (25 pts, +15 for a proportionate H3 layer)
        if h2_count > 0:
            score += 25
            if 0 < h3_count <= h2_count * 3:
                score += 15
        else:
            issues.append("No H2 headings found")
            recommendations.append("Use H2 headings to structure the content")

        score += self._quality_bonus(headings)

        if self._has_proper_hierarchy(headings):
            score += 10
        else:
            issues.append("Improper heading hierarchy")
            recommendations.append("Do not skip heading levels (e.g. H1 followed by H3)")

        metrics = HeadingsMetrics(
            h1_count=h1_count,
            h2_count=h2_count,
            h3_count=h3_count,
            total_headings=sum(len(level) for level in headings.levels()),
            has_h1=h1_count > 0,
            has_structure=h2_count > 0,
        )
        return self._result(score, issues, recommendations, metrics)

    def _quality_bonus(self, headings: HeadingSignals) -> int:
        """Two points per heading whose text is 20-70 characters long."""
        bonus = 0
        for level in headings.levels():
            for heading in level:
                if 20 <= len(heading.strip()) <= 70:
                    bonus += 2
        return min(bonus, MAX_QUALITY_BONUS)

    def _has_proper_hierarchy(self, headings: HeadingSignals) -> bool:
        used = [number for number, level in enumerate(headings.levels(), start=1) if level]
        return all(later - earlier <= 1 for earlier, later in zip(used, used[1:]))
