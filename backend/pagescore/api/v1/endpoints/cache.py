"""
Analysis cache management endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pagescore.dependencies import get_analysis_cache
from pagescore.logger import logger
from pagescore.services.cache.analysis_cache import AnalysisCache

router = APIRouter(tags=["Cache"])


def require_cache(cache: Optional[AnalysisCache] = Depends(get_analysis_cache)) -> AnalysisCache:
    if cache is None:
        raise HTTPException(status_code=503, detail="Analysis cache is not available")
    return cache


@router.get("/stats")
async def cache_stats(cache: AnalysisCache = Depends(require_cache)):
    """Cache statistics."""
    return cache.statistics()


@router.delete("/url")
async def invalidate_url(
    url: str = Query(..., min_length=1),
    cache: AnalysisCache = Depends(require_cache),
):
    """Drop every cached entry for a URL."""
    deleted = cache.invalidate_by_subject(url)
    logger.info(f"Invalidated {deleted} cache entries for {url}")
    return {"url": url, "deleted": deleted}


@router.delete("/domain/{domain}")
async def invalidate_domain(domain: str, cache: AnalysisCache = Depends(require_cache)):
    """Drop every cached entry mentioning a domain."""
    deleted = cache.invalidate_by_domain(domain)
    return {"domain": domain, "deleted": deleted}


@router.post("/cleanup")
async def cleanup(cache: AnalysisCache = Depends(require_cache)):
    """Remove expired and non-expiring entries."""
    return {"cleaned": cache.cleanup_expired_entries()}
