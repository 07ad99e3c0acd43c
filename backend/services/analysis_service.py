"""
Analysis service
Entry point for the website analysis, GEO score and content strategy operations.
"""

import logging
from typing import List, Optional

from config import GeoSettings, config
from integrations.anthropic_client import create_async_anthropic_client
from integrations.web_search import WebSearchClient
from schemas.domain import ContentStrategy, GeoScoreResult, PromptResult, WebsiteAnalysis
from services.ai.profile_extractor import ProfileExtractor
from services.ai.prompt_generator import PromptGenerator
from services.ai.strategy_generator import StrategyGenerator
from services.research.corpus import content_for_analysis
from services.research.crawler import SiteCrawler
from services.research.domain_classifier import DomainClassifier
from services.research.geo_score import GeoScorePipeline
from services.research.search_orchestrator import SearchOrchestrator
from utils.errors import ExtractionFailure

logger = logging.getLogger(__name__)


class AnalysisService:
    """Wires the crawler, Claude services and the GEO score pipeline together"""

    def __init__(self, settings: GeoSettings, crawler: Optional[SiteCrawler] = None, client=None):
        self.settings = settings
        self.crawler = crawler or SiteCrawler(
            max_pages=settings.crawl_max_pages,
            fetch_timeout=settings.crawl_fetch_timeout,
        )
        self._client = client

    @property
    def client(self):
        # Created on first use so a missing key only fails the calls that need it
        if self._client is None:
            self._client = create_async_anthropic_client(self.settings.anthropic_api_key)
        return self._client

    async def analyze_website(self, url: str) -> WebsiteAnalysis:
        logger.info(f"Starting website analysis for: {url}")
        pages = await self.crawler.crawl_site(url)
        if not pages:
            raise ExtractionFailure()

        content = content_for_analysis(pages, self.settings.max_content_chars)
        extractor = ProfileExtractor(self.client, model=self.settings.geo_model)
        return await extractor.extract_profile(content)

    async def run_geo_score(self, url: str, analysis: WebsiteAnalysis) -> GeoScoreResult:
        return await self.build_pipeline().run(url, analysis)

    async def generate_content_strategy(
        self,
        url: str,
        analysis: WebsiteAnalysis,
        prompt_results: List[PromptResult],
    ) -> ContentStrategy:
        generator = StrategyGenerator(
            self.client,
            self.crawler,
            model=self.settings.geo_model,
            max_competitors=self.settings.strategy_max_competitors,
            pages_per_competitor=self.settings.strategy_pages_per_competitor,
        )
        return await generator.generate(url, analysis, prompt_results)

    def build_pipeline(self) -> GeoScorePipeline:
        client = self.client
        search = WebSearchClient(
            client,
            model=self.settings.search_model,
            max_uses=self.settings.web_search_max_uses,
        )
        return GeoScorePipeline(
            prompt_generator=PromptGenerator(client, model=self.settings.geo_model),
            orchestrator=SearchOrchestrator(search),
            classifier=DomainClassifier(client, model=self.settings.geo_model),
            num_search_prompts=self.settings.num_search_prompts,
        )


# Global singleton instance
_analysis_service = None

def get_analysis_service() -> AnalysisService:
    """Get or create the global AnalysisService instance"""
    global _analysis_service
    if _analysis_service is None:
        _analysis_service = AnalysisService(GeoSettings.from_config(config))
    return _analysis_service
