"""
Scoring Engine - Main orchestrator that combines all scorers.

Coordinates the nine category scorers and the aggregator. Pure and
stateless per call: no I/O, safe to share between threads.
"""

from typing import Any, Optional

from pagescore.logger import logger
from pagescore.schemas.page_signals import ParsedPageSignals
from pagescore.services.scoring.aggregator import Clock, ScoreAggregator
from pagescore.services.scoring.content_scorer import ContentScorer
from pagescore.services.scoring.headings_scorer import HeadingsScorer
from pagescore.services.scoring.images_scorer import ImagesScorer
from pagescore.services.scoring.links_scorer import LinksScorer
from pagescore.services.scoring.meta_description_scorer import MetaDescriptionScorer
from pagescore.services.scoring.models import CategoryScoreResult, OverallScoreReport
from pagescore.services.scoring.social_media_scorer import SocialMediaScorer
from pagescore.services.scoring.structured_data_scorer import StructuredDataScorer
from pagescore.services.scoring.technical_scorer import TechnicalScorer
from pagescore.services.scoring.title_scorer import TitleScorer
from pagescore.services.scoring.weights import CATEGORY_WEIGHTS, SCORING_VERSION, CategoryWeights


class ScoringEngine:
    """Main scoring orchestrator."""

    def __init__(
        self,
        weights: CategoryWeights = CATEGORY_WEIGHTS,
        scoring_version: str = SCORING_VERSION,
        clock: Optional[Clock] = None,
    ):
        self.aggregator = ScoreAggregator(weights, scoring_version, clock)
        self.title_scorer = TitleScorer(weights.title)
        self.meta_description_scorer = MetaDescriptionScorer(weights.meta_description)
        self.headings_scorer = HeadingsScorer(weights.headings)
        self.content_scorer = ContentScorer(weights.content)
        self.images_scorer = ImagesScorer(weights.images)
        self.links_scorer = LinksScorer(weights.links)
        self.technical_scorer = TechnicalScorer(weights.technical)
        self.social_media_scorer = SocialMediaScorer(weights.social_media)
        self.structured_data_scorer = StructuredDataScorer(weights.structured_data)

    def score_categories(self, signals: Any) -> dict[str, CategoryScoreResult]:
        """Run every category scorer against its slice of the signals."""
        page = ParsedPageSignals.coerce(signals)
        results = (
            self.title_scorer.score(page.meta),
            self.meta_description_scorer.score(page.meta),
            self.headings_scorer.score(page.headings),
            self.content_scorer.score(page.content),
            self.images_scorer.score(page.images),
            self.links_scorer.score(page.links),
            self.technical_scorer.score(page.technical),
            self.social_media_scorer.score(page.social_media),
            self.structured_data_scorer.score(page.structured_data),
        )
        return {result.category: result for result in results}

    def score(self, signals: Any) -> OverallScoreReport:
        """Score parsed page signals.

        Args:
            signals: ParsedPageSignals instance or an equivalent mapping

        Returns:
            OverallScoreReport with overall score, grade and breakdown

        Raises:
            InvalidInputError: if signals is None or not a mapping
        """
        logger.debug("Running scoring engine...")

        report = self.aggregator.aggregate(self.score_categories(signals))

        logger.info(f"Scores: overall={report.overall_score}, grade={report.grade}")
        return report
