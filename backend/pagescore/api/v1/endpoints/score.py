"""
Scoring API endpoint.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from pagescore.dependencies import get_score_calculator
from pagescore.logger import logger
from pagescore.schemas.page_signals import ParsedPageSignals
from pagescore.services.score_calculator import ScoreCalculator

router = APIRouter(tags=["Score"])


@router.post("/score")
async def score_page(
    signals: ParsedPageSignals,
    url: Optional[str] = Query(None, description="Page URL; enables cached results"),
    disable_cache: bool = Query(False),
    priority: Optional[str] = Query(None, description="'high' shortens the cache TTL"),
    content_type: Optional[str] = Query(None, description="'news' or 'static' cache hint"),
    calculator: ScoreCalculator = Depends(get_score_calculator),
) -> Dict[str, Any]:
    """Score parsed page signals and return the overall report."""
    context: Dict[str, Any] = {"disable_cache": disable_cache}
    if priority:
        context["priority"] = priority
    if content_type:
        context["content_type"] = content_type

    logger.info(f"Scoring request for {url or 'anonymous page'}")
    return calculator.calculate(signals, url=url, context=context)
