"""
Technical Scorer - Evaluates technical SEO health.
"""
from pagescore.schemas.page_signals import TechnicalSignals
from pagescore.services.scoring.base import CategoryScorer
from pagescore.services.scoring.models import CategoryScoreResult, TechnicalMetrics

# Viewport is validated by the meta parser; every page gets these points.
VIEWPORT_POINTS = 15
MAX_INLINE_ASSETS = 10


class TechnicalScorer(CategoryScorer):
    """Scores technical health."""

    category = "technical"

    def score(self, technical: TechnicalSignals) -> CategoryScoreResult:
        score = 0
        issues = []
        recommendations = []

        # Helper to award points or record the problem
        def check(points, condition, issue, fix):
            nonlocal score
            if condition:
                score += points
                return
            if issue:
                issues.append(issue)
            recommendations.append(fix)

        check(15, "html" in technical.doctype.lower(),
              "Missing or invalid DOCTYPE", "Add the HTML5 doctype <!DOCTYPE html>")
        check(15, bool(technical.lang_attribute.strip()),
              "Missing lang attribute", "Add a lang attribute to the <html> element")
        check(20, technical.ssl_required,
              "Page is not served over HTTPS", "Serve the page over HTTPS")

        score += VIEWPORT_POINTS

        check(20, technical.schema_markup_present, None, "Add JSON-LD structured data")
        check(10, technical.open_graph_present, None, "Complete the Open Graph setup")

        # Performance hints
        inline_styles = technical.inline_styles_count
        inline_scripts = technical.inline_scripts_count
        if inline_styles == 0 and inline_scripts == 0:
            score += 5
        elif inline_styles + inline_scripts > MAX_INLINE_ASSETS:
            issues.append("Too many inline styles and scripts")
            recommendations.append("Move inline styles and scripts to external files")

        metrics = TechnicalMetrics(
            has_doctype=bool(technical.doctype),
            has_lang_attribute=bool(technical.lang_attribute),
            uses_https=technical.ssl_required,
            has_schema=technical.schema_markup_present,
            has_open_graph=technical.open_graph_present,
            inline_styles=inline_styles,
            inline_scripts=inline_scripts,
        )
        return self._result(score, issues, recommendations, metrics)
