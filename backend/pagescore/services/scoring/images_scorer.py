"""
Images Scorer - Alt text and title attribute coverage.
"""
from pagescore.schemas.page_signals import ImageSignals
from pagescore.services.scoring.base import CategoryScorer, round_half_up
from pagescore.services.scoring.models import CategoryScoreResult, ImagesMetrics


class ImagesScorer(CategoryScorer):
    """Starts from a perfect score and subtracts for missing attributes."""

    category = "images"

    def score(self, images: ImageSignals) -> CategoryScoreResult:
        total = images.total_count
        without_alt = images.without_alt_count

        if total == 0:
            # Text-only pages are not penalised.
            return self._result(
                100,
                ["No images found"],
                ["Consider adding relevant images"],
                ImagesMetrics(total_images=0, without_alt=0, alt_text_coverage=0.0),
            )

        score = 100
        issues = []
        recommendations = []

        if without_alt > 0:
            score -= round_half_up(without_alt / total * 100)
            issues.append(f"{without_alt} image(s) missing alt text")
            recommendations.append("Add descriptive alt text to all images")

        without_title = images.without_title_count
        if without_title > 0 and without_title == total:
            score -= 10
            recommendations.append("Consider adding title attributes to images")

        coverage = max(round_half_up((total - without_alt) / total * 100, 1), 0.0)
        metrics = ImagesMetrics(total_images=total, without_alt=without_alt, alt_text_coverage=coverage)
        return self._result(score, issues, recommendations, metrics)
