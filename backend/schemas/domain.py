"""Domain models and entities"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SourceCategory(str, Enum):
    """Closed set of categories a cited domain can fall into"""
    SOCIAL_MEDIA = "social_media"
    SHOPPING = "shopping"
    FORUMS_QA = "forums_qa"
    REVIEW_EDITORIAL = "review_editorial"
    NEWS_PRESS = "news_press"
    OTHER = "other"

    @classmethod
    def coerce(cls, value) -> "SourceCategory":
        """Map classifier output onto the enum; anything unrecognized becomes OTHER."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.OTHER


class PageContent(BaseModel):
    """Extracted text of one crawled page"""
    model_config = ConfigDict(frozen=True)

    url: str
    text: str


class WebsiteAnalysis(BaseModel):
    """Business profile extracted from the crawled corpus"""
    sector_of_activity: str = Field(..., description="Sector or industry the business operates in")
    business_type: str = Field(..., description="Type of business (e.g. B2B, B2C, marketplace)")
    business_description: str = Field(..., description="Short description of what the business does")
    website_structure: str = Field(..., description="Description of the website structure and main sections")


class WebSearchCallResult(BaseModel):
    """Queries issued and URLs cited by one search-and-answer call"""
    model_config = ConfigDict(frozen=True)

    internal_queries: List[str] = Field(default_factory=list)
    cited_urls: List[str] = Field(default_factory=list)


class SourcesByDomain(BaseModel):
    """Citation URLs grouped under one domain key"""
    model_config = ConfigDict(frozen=True)

    domain: str
    count: int
    urls: List[str]  # Distinct, sorted lexicographically
    category: SourceCategory = SourceCategory.OTHER


class PromptResult(BaseModel):
    """Outcome of a single generated prompt"""
    model_config = ConfigDict(frozen=True)

    prompt: str
    apparition_likelihood: int  # 0 or 100, not a probability
    sources: List[SourcesByDomain] = Field(default_factory=list)
    internal_queries: List[str] = Field(default_factory=list)


class GeoScoreResult(BaseModel):
    """Final visibility report"""
    model_config = ConfigDict(frozen=True)

    score: int
    num_search_prompts: int
    generated_prompts: List[str]
    internal_prompts: List[str]
    analysis: Optional[WebsiteAnalysis] = None
    sources: List[SourcesByDomain]
    prompt_results: List[PromptResult]


class StrategySection(BaseModel):
    heading: str
    description: str


class ContentStrategy(BaseModel):
    """Content asset recommendation derived from competitor content"""
    title: str
    target_platform: str
    target_format: str
    description: str
    structure: List[StrategySection] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
