"""
Score Calculator - read-through cache in front of the scoring engine.
"""
from typing import Any, Mapping, Optional

from pagescore.logger import logger
from pagescore.schemas.page_signals import ParsedPageSignals
from pagescore.services.cache.analysis_cache import AnalysisCache
from pagescore.services.cache.keys import context_fingerprint
from pagescore.services.scoring.engine import ScoringEngine

# Context keys forwarded to the TTL policy (and therefore part of the key)
TTL_HINT_KEYS = ("priority", "content_type")


def should_use_cache(context: Optional[Mapping[str, Any]]) -> bool:
    context = context or {}
    return not context.get("disable_cache", False) and not context.get("real_time", False)


class ScoreCalculator:
    """Scores parsed page signals, reusing cached reports per URL."""

    def __init__(self, engine: Optional[ScoringEngine] = None, cache: Optional[AnalysisCache] = None):
        self.engine = engine or ScoringEngine()
        self.cache = cache

    @staticmethod
    def cache_context(signals: ParsedPageSignals, context: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Cache context for a report: the signals fingerprint plus TTL hints."""
        context = context or {}
        cache_context = {
            "type": "score_calculation",
            "signals": context_fingerprint(signals.model_dump(mode="json")),
        }
        cache_context.update({key: context[key] for key in TTL_HINT_KEYS if key in context})
        return cache_context

    def calculate(
        self,
        signals: Any,
        url: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Serialized OverallScoreReport for the signals.

        Without a URL, a cache, or with caching disabled by the context this
        is a plain engine call. Cache failures never surface here.
        """
        page = ParsedPageSignals.coerce(signals)
        use_cache = self.cache is not None and bool(url) and should_use_cache(context)
        cache_context = self.cache_context(page, context) if use_cache else {}

        if use_cache:
            cached = self.cache.get_analysis(url, cache_context)
            if cached is not None:
                logger.debug(f"Returning cached score calculation for {url}")
                return cached

        report = self.engine.score(page).to_dict()

        if use_cache and not self.cache.store_analysis(url, report, "score_only", cache_context):
            logger.warning(f"Score for {url} was computed but could not be cached")

        return report
