"""
GEO Score Pipeline
Runs generated prompts through web search and turns the cited sources into a visibility report.
"""

import logging
from typing import List, Protocol

from schemas.domain import (
    GeoScoreResult,
    PromptResult,
    SourcesByDomain,
    WebSearchCallResult,
    WebsiteAnalysis,
)
from services.research.domain_classifier import DomainClassifier
from services.research.scoring import apparition_likelihood, visibility_score
from services.research.search_orchestrator import SearchOrchestrator
from services.research.source_aggregator import apply_categories, group_sources
from utils.errors import PromptGenerationError
from utils.urls import normalize_for_match

logger = logging.getLogger(__name__)


class PromptSource(Protocol):
    async def generate_prompts(self, analysis: WebsiteAnalysis, count: int) -> List[str]:
        ...


class GeoScorePipeline:
    """Prompt generation -> search fan-out -> aggregation -> classification -> score"""

    def __init__(
        self,
        prompt_generator: PromptSource,
        orchestrator: SearchOrchestrator,
        classifier: DomainClassifier,
        num_search_prompts: int = 10,
    ):
        self.prompt_generator = prompt_generator
        self.orchestrator = orchestrator
        self.classifier = classifier
        self.num_search_prompts = num_search_prompts

    async def run(self, url: str, analysis: WebsiteAnalysis) -> GeoScoreResult:
        logger.info(f"Starting GEO Score Pipeline for: {url}")

        generated_prompts = await self.prompt_generator.generate_prompts(analysis, self.num_search_prompts)
        logger.info(f"Generated {len(generated_prompts)} search prompts.")
        if not generated_prompts:
            raise PromptGenerationError()

        results = await self.orchestrator.run_all(generated_prompts)
        return await self.assemble(url, analysis, generated_prompts, results)

    async def assemble(
        self,
        url: str,
        analysis: WebsiteAnalysis,
        generated_prompts: List[str],
        results: List[WebSearchCallResult],
    ) -> GeoScoreResult:
        """Aggregate per-prompt search results into the final report"""
        internal_prompts = [q for r in results for q in r.internal_queries]
        all_urls = [u for r in results for u in r.cited_urls]
        normalized_site = normalize_for_match(url)

        sources = group_sources(all_urls)
        per_prompt_sources = [group_sources(r.cited_urls) for r in results]
        likelihoods = [apparition_likelihood(r.cited_urls, normalized_site) for r in results]

        logger.info("Calculating scores and classifying domains...")
        categories = await self.classifier.classify(self._domains_by_reference(sources, per_prompt_sources))

        prompt_results = [
            PromptResult(
                prompt=prompt,
                apparition_likelihood=likelihood,
                sources=apply_categories(grouped, categories),
                internal_queries=list(result.internal_queries),
            )
            for prompt, result, grouped, likelihood
            in zip(generated_prompts, results, per_prompt_sources, likelihoods)
        ]
        score = visibility_score(prompt_results)
        logger.info(f"GEO score for {url}: {score} ({likelihoods.count(100)}/{len(likelihoods)} prompts cite the site)")

        return GeoScoreResult(
            score=score,
            num_search_prompts=self.num_search_prompts,
            generated_prompts=list(generated_prompts),
            internal_prompts=internal_prompts,
            analysis=analysis,
            sources=apply_categories(sources, categories),
            prompt_results=prompt_results,
        )

    @staticmethod
    def _domains_by_reference(
        sources: List[SourcesByDomain],
        per_prompt_sources: List[List[SourcesByDomain]],
    ) -> List[str]:
        """Distinct domains, global ordering first (most referenced first)"""
        domains = {s.domain: None for s in sources}
        for grouped in per_prompt_sources:
            for s in grouped:
                domains.setdefault(s.domain, None)
        return list(domains)
