"""
Social Media Scorer - Open Graph and Twitter Card tags.

Combined score = 0.7 x Open Graph sub-score + 0.3 x Twitter sub-score.
"""
from pagescore.schemas.page_signals import SocialMediaSignals
from pagescore.services.scoring.base import CategoryScorer, round_half_up
from pagescore.services.scoring.models import CategoryScoreResult, SocialMediaMetrics

REQUIRED_OG_TAGS = ("title", "description", "image", "url")
OG_TAG_POINTS = 15
OG_WEIGHT = 0.7
TWITTER_WEIGHT = 0.3


class SocialMediaScorer(CategoryScorer):
    """Scores social sharing tags."""

    category = "social_media"

    def score(self, social: SocialMediaSignals) -> CategoryScoreResult:
        open_graph = social.open_graph
        twitter = social.twitter_cards
        recommendations = []

        og_score = sum(OG_TAG_POINTS for tag in REQUIRED_OG_TAGS if open_graph.get(tag))
        if og_score < OG_TAG_POINTS * len(REQUIRED_OG_TAGS):
            recommendations.append("Complete the Open Graph setup (title, description, image, url)")

        twitter_score = 0
        if twitter.get("card"):
            twitter_score += 20
            if twitter.get("title") and twitter.get("description"):
                twitter_score += 20
        else:
            recommendations.append("Add Twitter Card tags")

        score = round_half_up(og_score * OG_WEIGHT + twitter_score * TWITTER_WEIGHT, 1)

        metrics = SocialMediaMetrics(
            open_graph_tags=len(open_graph),
            twitter_card_tags=len(twitter),
            has_og_image=bool(open_graph.get("image")),
            has_twitter_card=bool(twitter.get("card")),
        )
        return self._result(score, [], recommendations, metrics)
