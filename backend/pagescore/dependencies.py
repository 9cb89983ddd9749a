"""
Process-wide service instances and their FastAPI dependency providers.
"""
from typing import Optional

from pagescore.config import settings
from pagescore.exceptions import CacheUnavailableError
from pagescore.logger import logger
from pagescore.services.cache.analysis_cache import AnalysisCache
from pagescore.services.cache.codec import PayloadCodec
from pagescore.services.cache.keys import CacheKeyBuilder
from pagescore.services.cache.store import KeyValueStore, MemoryStore, RedisStore
from pagescore.services.score_calculator import ScoreCalculator

_analysis_cache: Optional[AnalysisCache] = None
_cache_initialized = False
_score_calculator: Optional[ScoreCalculator] = None


def build_store() -> KeyValueStore:
    if settings.REDIS_URL:
        return RedisStore.from_url(settings.REDIS_URL)
    logger.info("REDIS_URL not set, using in-process memory store")
    return MemoryStore()


def build_analysis_cache() -> Optional[AnalysisCache]:
    """AnalysisCache from settings, or None when disabled or unreachable."""
    if not settings.CACHE_ENABLED:
        logger.info("Analysis cache disabled by configuration")
        return None

    try:
        return AnalysisCache(
            build_store(),
            key_builder=CacheKeyBuilder(settings.CACHE_KEY_PREFIX),
            codec=PayloadCodec(settings.CACHE_COMPRESSION_THRESHOLD, settings.CACHE_COMPRESSION_ENABLED),
            schema_version=settings.CACHE_SCHEMA_VERSION,
        )
    except CacheUnavailableError as e:
        logger.error(f"Analysis cache unavailable, scoring without cache: {e}")
        return None


def get_analysis_cache() -> Optional[AnalysisCache]:
    """Get global analysis cache instance (singleton)."""
    global _analysis_cache, _cache_initialized
    if not _cache_initialized:
        _analysis_cache = build_analysis_cache()
        _cache_initialized = True
    return _analysis_cache


def get_score_calculator() -> ScoreCalculator:
    """Get global score calculator instance (singleton)."""
    global _score_calculator
    if _score_calculator is None:
        _score_calculator = ScoreCalculator(cache=get_analysis_cache())
    return _score_calculator
