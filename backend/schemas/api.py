"""API request and response schemas"""

from pydantic import BaseModel, Field
from typing import List

from schemas.domain import WebsiteAnalysis, PromptResult


class AnalyzeRequest(BaseModel):
    url: str = Field(..., description="Website URL to crawl and profile")


class GeoScoreRequest(BaseModel):
    url: str
    analysis: WebsiteAnalysis


class ContentStrategyRequest(BaseModel):
    url: str
    analysis: WebsiteAnalysis
    prompt_results: List[PromptResult] = Field(default_factory=list)
