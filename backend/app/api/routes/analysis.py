"""Website analysis, GEO score and content strategy routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from config import config
from schemas.api import AnalyzeRequest, ContentStrategyRequest, GeoScoreRequest
from schemas.domain import ContentStrategy, GeoScoreResult, WebsiteAnalysis
from services.analysis_service import AnalysisService, get_analysis_service
from utils.rate_limit import limiter

logger = logging.getLogger(__name__)

router = APIRouter()


def require_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")
    return url


@router.post("", response_model=WebsiteAnalysis)
@limiter.limit(config.ANALYSIS_RATE_LIMIT)
async def analyze(
    request: Request,
    analyze_request: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """Crawl the site and extract its business profile."""
    url = require_url(analyze_request.url)
    return await service.analyze_website(url)


@router.post("/geo-score", response_model=GeoScoreResult)
@limiter.limit(config.ANALYSIS_RATE_LIMIT)
async def geo_score(
    request: Request,
    geo_request: GeoScoreRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    Run generated prompts through web search and score how often the site is cited.

    Requires the analysis returned by POST /api/analyze.
    """
    url = require_url(geo_request.url)
    return await service.run_geo_score(url, geo_request.analysis)


@router.post("/strategy", response_model=ContentStrategy)
@limiter.limit(config.ANALYSIS_RATE_LIMIT)
async def generate_strategy(
    request: Request,
    strategy_request: ContentStrategyRequest,
    service: AnalysisService = Depends(get_analysis_service),
):
    """Design a content asset for the selected prompt results."""
    url = require_url(strategy_request.url)
    if not strategy_request.prompt_results:
        raise HTTPException(status_code=400, detail="At least one prompt result is required")
    return await service.generate_content_strategy(url, strategy_request.analysis, strategy_request.prompt_results)
