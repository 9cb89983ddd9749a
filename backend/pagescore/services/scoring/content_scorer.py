"""
Content Scorer - Evaluate content volume and density.

Rubric:
- Word count (40 pts, requires >= 300 words)
- Text-to-HTML ratio (25 pts)
- Reading time (20 pts)
- Paragraph structure (10 pts)
"""

from pagescore.schemas.page_signals import ContentSignals
from pagescore.services.scoring.base import CategoryScorer
from pagescore.services.scoring.models import CategoryScoreResult, ContentMetrics
from pagescore.logger import logger

MIN_WORD_COUNT = 300


class ContentScorer(CategoryScorer):
    """Score content quality factors."""

    category = "content"

    def score(self, content: ContentSignals) -> CategoryScoreResult:
        word_count = content.word_count
        ratio = content.text_to_html_ratio
        reading_time = content.reading_time_minutes
        score = 0
        issues = []
        recommendations = []

        # === WORD COUNT ===
        if word_count >= MIN_WORD_COUNT:
            if word_count >= 1000:
                score += 40  # Comprehensive
            elif word_count >= 600:
                score += 35
            else:
                score += 25
        else:
            issues.append("Content is too short")
            recommendations.append(f"Expand the content to at least {MIN_WORD_COUNT} words")

        # === DENSITY ===
        if ratio >= 25:
            score += 25
        elif ratio >= 15:
            score += 15
        else:
            issues.append("Low text-to-HTML ratio")
            recommendations.append("Increase the proportion of visible text to markup")

        # === READING TIME ===
        if 2 <= reading_time <= 10:
            score += 20
        elif reading_time > 10:
            score += 15  # Long-form can suit detailed topics

        # === STRUCTURE ===
        if content.paragraphs >= 3:
            score += 10

        logger.debug(f"Content score: {score}/100")

        metrics = ContentMetrics(
            word_count=word_count,
            text_to_html_ratio=ratio,
            reading_time_minutes=reading_time,
            paragraphs=content.paragraphs,
            sufficient_content=word_count >= MIN_WORD_COUNT,
        )
        return self._result(score, issues, recommendations, metrics)
