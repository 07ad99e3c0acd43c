"""Business profile extraction from crawled website content"""

import json
import logging

import anthropic
from pydantic import ValidationError

from integrations.anthropic_client import get_default_model, response_text, upstream_error
from schemas.domain import WebsiteAnalysis
from utils.errors import UpstreamServiceError
from utils.llm_json import parse_json_response

logger = logging.getLogger(__name__)


class ProfileExtractor:
    """Asks Claude for a structured marketing profile of a website"""

    def __init__(self, client: anthropic.AsyncAnthropic, model: str = None):
        self.client = client
        self.model = model or get_default_model()

    async def extract_profile(self, content: str) -> WebsiteAnalysis:
        """
        Build a WebsiteAnalysis from the assembled corpus.

        Raises:
            UpstreamServiceError: If the API call fails or the reply is not a valid profile
        """
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=1500,
                temperature=0.3,
                messages=[{"role": "user", "content": self._build_prompt(content)}],
            )
        except anthropic.APIError as e:
            raise upstream_error("Anthropic profile extraction", e)

        text = response_text(response)
        try:
            analysis = WebsiteAnalysis(**parse_json_response(text))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.debug(f"Profile response was: {text[:200]}")
            raise UpstreamServiceError("Anthropic profile extraction", f"invalid profile response: {e}")

        logger.info(f"Analysis complete. Sector: {analysis.sector_of_activity}")
        return analysis

    @staticmethod
    def _build_prompt(content: str) -> str:
        return f"""Analyze the following website content extracted from multiple pages and provide structured information for marketing (GEO) purposes.

Website content:
{content}

Provide:
1. sector_of_activity: The sector or industry the business operates in.
2. business_type: The type of business (e.g. B2B, B2C, marketplace, SaaS).
3. business_description: A short, clear description of what the business does.
4. website_structure: A description of the website structure and main sections (e.g. homepage, product pages, blog, contact).

Return ONLY a JSON object with exactly these four string fields, no additional text."""
