"""
API tests for the analysis routes
"""

import unittest
import sys
import os
from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from app import create_app
from schemas.domain import (
    ContentStrategy,
    GeoScoreResult,
    PromptResult,
    SourceCategory,
    SourcesByDomain,
    WebsiteAnalysis,
)
from services.analysis_service import get_analysis_service
from utils.errors import ConfigurationError, ExtractionFailure, UpstreamServiceError
from utils.rate_limit import get_client_key, limiter


ANALYSIS = WebsiteAnalysis(
    sector_of_activity="Furniture",
    business_type="B2C",
    business_description="Handmade oak furniture",
    website_structure="Home, shop, blog, contact",
)

SOURCES = [SourcesByDomain(domain="reddit.com", count=2, urls=["https://reddit.com/r/a"], category=SourceCategory.FORUMS_QA)]

GEO_RESULT = GeoScoreResult(
    score=50,
    num_search_prompts=2,
    generated_prompts=["prompt A", "prompt B"],
    internal_prompts=["query A"],
    analysis=ANALYSIS,
    sources=SOURCES,
    prompt_results=[
        PromptResult(prompt="prompt A", apparition_likelihood=100, sources=SOURCES),
        PromptResult(prompt="prompt B", apparition_likelihood=0),
    ],
)


class TestAnalysisRoutes(unittest.TestCase):

    def setUp(self):
        self.limiter_enabled = limiter.enabled
        limiter.enabled = False

        self.service = Mock()
        self.service.analyze_website = AsyncMock(return_value=ANALYSIS)
        self.service.run_geo_score = AsyncMock(return_value=GEO_RESULT)
        self.service.generate_content_strategy = AsyncMock(return_value=ContentStrategy(
            title="Guide", target_platform="SEO Blog", target_format="FAQ", description="d",
        ))

        self.app = create_app()
        self.app.dependency_overrides[get_analysis_service] = lambda: self.service
        self.client = TestClient(self.app)

    def tearDown(self):
        limiter.enabled = self.limiter_enabled

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_analyze(self):
        response = self.client.post("/api/analyze", json={"url": "  https://site.test  "})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["sector_of_activity"], "Furniture")
        self.service.analyze_website.assert_awaited_once_with("https://site.test")

    def test_analyze_requires_url(self):
        response = self.client.post("/api/analyze", json={"url": "   "})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "URL is required")
        self.service.analyze_website.assert_not_called()

    def test_extraction_failure(self):
        self.service.analyze_website = AsyncMock(side_effect=ExtractionFailure())

        response = self.client.post("/api/analyze", json={"url": "https://site.test"})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json(), {
            "detail": "Could not extract any content from the website",
            "type": "extraction_failure",
        })

    def test_missing_api_key(self):
        self.service.analyze_website = AsyncMock(side_effect=ConfigurationError("ANTHROPIC_API_KEY is not set"))

        response = self.client.post("/api/analyze", json={"url": "https://site.test"})

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["type"], "configuration_error")

    def test_geo_score(self):
        response = self.client.post("/api/analyze/geo-score", json={
            "url": "https://target.com",
            "analysis": ANALYSIS.model_dump(),
        })

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["score"], 50)
        self.assertEqual(body["sources"][0]["category"], "forums_qa")
        self.assertEqual([pr["apparition_likelihood"] for pr in body["prompt_results"]], [100, 0])

    def test_geo_score_requires_analysis(self):
        response = self.client.post("/api/analyze/geo-score", json={"url": "https://target.com"})

        self.assertEqual(response.status_code, 422)
        self.service.run_geo_score.assert_not_called()

    def test_geo_score_upstream_failure(self):
        self.service.run_geo_score = AsyncMock(
            side_effect=UpstreamServiceError("Anthropic web search", "overloaded", status=529)
        )

        response = self.client.post("/api/analyze/geo-score", json={
            "url": "https://target.com",
            "analysis": ANALYSIS.model_dump(),
        })

        self.assertEqual(response.status_code, 502)
        self.assertIn("529", response.json()["detail"])

    def test_strategy(self):
        response = self.client.post("/api/analyze/strategy", json={
            "url": "https://target.com",
            "analysis": ANALYSIS.model_dump(),
            "prompt_results": [pr.model_dump(mode="json") for pr in GEO_RESULT.prompt_results],
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["title"], "Guide")
        args = self.service.generate_content_strategy.await_args.args
        self.assertEqual(args[0], "https://target.com")
        self.assertEqual(len(args[2]), 2)

    def test_strategy_requires_prompt_results(self):
        response = self.client.post("/api/analyze/strategy", json={
            "url": "https://target.com",
            "analysis": ANALYSIS.model_dump(),
            "prompt_results": [],
        })

        self.assertEqual(response.status_code, 400)
        self.service.generate_content_strategy.assert_not_called()


class TestAnalysisRateLimit(unittest.TestCase):

    def setUp(self):
        self.limiter_enabled = limiter.enabled
        limiter.enabled = True
        limiter.reset()

        self.service = Mock()
        self.service.analyze_website = AsyncMock(return_value=ANALYSIS)

        self.app = create_app()
        self.app.dependency_overrides[get_analysis_service] = lambda: self.service
        self.client = TestClient(self.app)

    def tearDown(self):
        limiter.reset()
        limiter.enabled = self.limiter_enabled

    def test_key_ignores_forwarded_header(self):
        request = Mock()
        request.headers = {"X-Forwarded-For": "1.1.1.1"}
        request.client.host = "10.0.0.7"

        self.assertEqual(get_client_key(request), "ip_10.0.0.7")

    def test_rotating_forwarded_header_still_hits_limit(self):
        statuses = []
        for i in range(100):
            response = self.client.post(
                "/api/analyze",
                json={"url": "https://site.test"},
                headers={"X-Forwarded-For": f"203.0.113.{i}"},
            )
            statuses.append(response.status_code)
            if response.status_code == 429:
                break

        self.assertEqual(statuses[-1], 429)
        self.assertIn("Rate limit exceeded", response.json()["detail"])
        self.assertLess(self.service.analyze_website.await_count, len(statuses))


if __name__ == '__main__':
    unittest.main()
