"""
Links Scorer - Internal/external balance and anchor text.
"""
from pagescore.schemas.page_signals import LinkSignals
from pagescore.services.scoring.base import CategoryScorer, round_half_up
from pagescore.services.scoring.models import CategoryScoreResult, LinksMetrics

MAX_ANCHOR_PENALTY = 20


class LinksScorer(CategoryScorer):
    """Scores link structure."""

    category = "links"

    def score(self, links: LinkSignals) -> CategoryScoreResult:
        total = links.total_count
        internal = links.internal_count
        external = links.external_count
        empty_anchors = links.empty_anchor_count
        issues = []
        recommendations = []

        if total == 0:
            issues.append("No links found")
            recommendations.append("Add internal and external links")
            metrics = LinksMetrics(
                total_links=0,
                internal_links=internal,
                external_links=external,
                empty_anchor_count=empty_anchors,
                internal_ratio=0.0,
            )
            return self._result(0, issues, recommendations, metrics)

        score = 0

        # Internal linking (40 pts, +10 for three or more)
        if internal > 0:
            score += 40
            if internal >= 3:
                score += 10
        else:
            issues.append("No internal links found")
            recommendations.append("Add internal links to related pages")

        # External linking (20 pts, +10 when not outnumbering internal links)
        if external > 0:
            score += 20
            if external <= internal:
                score += 10
        else:
            recommendations.append("Consider linking to authoritative external sources")

        # Anchor text
        if empty_anchors == 0:
            score += 20
        else:
            score -= min(empty_anchors / total * 50, MAX_ANCHOR_PENALTY)
            issues.append(f"{empty_anchors} link(s) with empty anchor text")
            recommendations.append("Add descriptive anchor text to all links")

        ratio = internal / total
        if 0.6 <= ratio <= 0.8:
            score += 10

        metrics = LinksMetrics(
            total_links=total,
            internal_links=internal,
            external_links=external,
            empty_anchor_count=empty_anchors,
            internal_ratio=round_half_up(ratio * 100, 1),
        )
        return self._result(score, issues, recommendations, metrics)
