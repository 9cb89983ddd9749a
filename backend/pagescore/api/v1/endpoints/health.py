"""
Health check endpoint.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from pagescore.config import settings
from pagescore.dependencies import get_analysis_cache
from pagescore.exceptions import CacheError
from pagescore.services.cache.analysis_cache import AnalysisCache

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/detailed")
async def detailed_health(cache: Optional[AnalysisCache] = Depends(get_analysis_cache)):
    """Detailed health check with analysis cache status."""
    if cache is None:
        cache_status = {"enabled": False, "available": False}
    else:
        try:
            available = cache.backend.ping()
        except CacheError:
            available = False
        cache_status = {
            "enabled": True,
            "available": available,
            "backend": type(cache.backend).__name__,
            "schema_version": cache.schema_version,
        }

    return {
        "status": "ok" if cache is None or cache_status["available"] else "degraded",
        "scoring_version": settings.SCORING_VERSION,
        "cache": cache_status,
    }
