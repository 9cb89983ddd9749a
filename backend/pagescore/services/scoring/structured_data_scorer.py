"""
Structured Data Scorer - JSON-LD, Microdata and RDFa markup.
"""
from pagescore.schemas.page_signals import StructuredDataSignals
from pagescore.services.scoring.base import CategoryScorer
from pagescore.services.scoring.models import CategoryScoreResult, StructuredDataMetrics


class StructuredDataScorer(CategoryScorer):
    """JSON-LD is preferred; Microdata/RDFa count as alternatives."""

    category = "structured_data"

    def score(self, structured: StructuredDataSignals) -> CategoryScoreResult:
        json_ld = structured.json_ld
        microdata = structured.microdata
        rdfa = structured.rdfa
        score = 0
        recommendations = []

        if json_ld:
            score += 60
            if len(json_ld) >= 2:
                score += 20
        else:
            recommendations.append("Add JSON-LD structured data")

        if microdata or rdfa:
            score += 20

        if score == 0:
            recommendations.append("Implement structured data markup (JSON-LD, Microdata or RDFa)")

        total = len(json_ld) + len(microdata) + len(rdfa)
        metrics = StructuredDataMetrics(
            json_ld_schemas=len(json_ld),
            microdata_schemas=len(microdata),
            rdfa_schemas=len(rdfa),
            total_schemas=total,
            has_structured_data=total > 0,
        )
        return self._result(score, [], recommendations, metrics)
