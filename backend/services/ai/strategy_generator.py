"""
Content Strategy Generation
Crawls the most cited competitor pages and asks Claude for a content asset designed to outrank them.
"""

import asyncio
import json
import logging
from typing import List

import anthropic
from pydantic import ValidationError

from integrations.anthropic_client import get_default_model, response_text, upstream_error
from schemas.domain import ContentStrategy, PageContent, PromptResult, WebsiteAnalysis
from services.research.crawler import SiteCrawler
from utils.errors import UpstreamServiceError
from utils.llm_json import parse_json_response

logger = logging.getLogger(__name__)

COMPETITOR_TEXT_CHARS = 10_000

SYSTEM_PROMPT = """You are an elite SEO and Content Strategy architect.
Your goal is to design a highly specific content asset that helps the target website rank for their chosen search queries.
Analyze the target website's profile and the actual scraped content from currently ranking competitors.
Formulate a robust, modern content strategy structured into specific headings, specifying exactly what type of content to create to outrank them."""


class StrategyGenerator:
    """Builds a ContentStrategy from tracked prompts and competitor content"""

    def __init__(
        self,
        client: anthropic.AsyncAnthropic,
        crawler: SiteCrawler,
        model: str = None,
        max_competitors: int = 5,
        pages_per_competitor: int = 3,
    ):
        self.client = client
        self.crawler = crawler
        self.model = model or get_default_model()
        self.max_competitors = max_competitors
        self.pages_per_competitor = pages_per_competitor

    async def generate(
        self,
        target_url: str,
        analysis: WebsiteAnalysis,
        prompt_results: List[PromptResult],
    ) -> ContentStrategy:
        logger.info(f"[Strategy] Generating strategy for {target_url} based on {len(prompt_results)} tracked queries.")

        competitor_urls = self.competitor_urls(prompt_results, self.max_competitors)
        logger.info(f"[Strategy] Scraping {len(competitor_urls)} top competitor sources...")
        pages = await self._crawl_competitors(competitor_urls)

        context = "\n\n".join(
            f"\n--- URL: {page.url} ---\n{page.text[:COMPETITOR_TEXT_CHARS]}" for page in pages
        )

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=3000,
                temperature=0.5,
                system=SYSTEM_PROMPT,
                messages=[{
                    "role": "user",
                    "content": self._build_prompt(target_url, analysis, prompt_results, context),
                }],
            )
        except anthropic.APIError as e:
            raise upstream_error("Anthropic strategy generation", e)

        text = response_text(response)
        try:
            strategy = ContentStrategy(**parse_json_response(text))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.debug(f"Strategy response was: {text[:200]}")
            raise UpstreamServiceError("Anthropic strategy generation", f"invalid strategy response: {e}")

        logger.info("[Strategy] Content Strategy generation complete.")
        return strategy

    @staticmethod
    def competitor_urls(prompt_results: List[PromptResult], limit: int) -> List[str]:
        """Distinct cited URLs in the order they appear across prompt results"""
        seen = {}
        for pr in prompt_results:
            for source in pr.sources:
                for url in source.urls:
                    seen.setdefault(url, None)
        return list(seen)[:limit]

    async def _crawl_competitors(self, urls: List[str]) -> List[PageContent]:
        async def crawl_one(url: str) -> List[PageContent]:
            try:
                return await self.crawler.crawl_site(url, max_pages=self.pages_per_competitor)
            except Exception as e:
                logger.warning(f"[Strategy] Competitor crawl failed for {url}: {e}")
                return []

        results = await asyncio.gather(*[crawl_one(url) for url in urls])
        return [page for pages in results for page in pages]

    @staticmethod
    def _build_prompt(
        target_url: str,
        analysis: WebsiteAnalysis,
        prompt_results: List[PromptResult],
        competitor_context: str,
    ) -> str:
        tracked = "\n".join(
            f"- {pr.prompt} (Target site cited {pr.apparition_likelihood}% of the time)" for pr in prompt_results
        )
        context = competitor_context or "No competitor content could be successfully scraped."
        return f"""Target Website Profiling:
URL: {target_url}
Sector: {analysis.sector_of_activity}
Business Type: {analysis.business_type}
Description: {analysis.business_description}

Tracked Search Queries the user wants to rank for:
{tracked}

---

COMPETITOR SCRAPED CONTEXT (What currently ranks for these queries):
{context}

---

Design the optimal content strategy (format, structure, and keywords) that this specific business should deploy to capture these search queries.

Return ONLY a JSON object with these fields, no additional text:
- "title": A catchy, actionable title for this content piece.
- "target_platform": The ideal platform/channel (e.g., SEO Blog, Reddit thread, LinkedIn Post, Knowledge Base).
- "target_format": The format type (e.g., How-to Guide, Listicle, FAQ, Case Study).
- "description": A brief summary of what the content should be about and its primary goal.
- "structure": An array of {{"heading": "...", "description": "..."}} objects outlining the sections.
- "keywords": An array of high-impact keywords extracted from the competitor analysis."""
