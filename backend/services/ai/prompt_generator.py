"""Generates customer-style search prompts from a business profile"""

import json
import logging
from typing import List

import anthropic

from integrations.anthropic_client import get_default_model, response_text, upstream_error
from schemas.domain import WebsiteAnalysis
from utils.llm_json import parse_json_response

logger = logging.getLogger(__name__)

MAX_PROMPTS = 10


class PromptGenerator:

    def __init__(self, client: anthropic.AsyncAnthropic, model: str = None):
        self.client = client
        self.model = model or get_default_model()

    async def generate_prompts(self, analysis: WebsiteAnalysis, count: int) -> List[str]:
        """
        Generate up to `count` brand-free prompts a real customer would type into a chat assistant.

        An unusable reply yields an empty list; API failures raise UpstreamServiceError.
        """
        count = min(MAX_PROMPTS, max(1, count))
        logger.info(f"Generating {count} search prompts...")
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=1500,
                temperature=0.7,
                messages=[{"role": "user", "content": self._build_prompt(analysis, count)}],
            )
        except anthropic.APIError as e:
            raise upstream_error("Anthropic prompt generation", e)

        prompts = self._parse_prompts(response_text(response))
        return prompts[:count]

    @staticmethod
    def _parse_prompts(text: str) -> List[str]:
        try:
            parsed = parse_json_response(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse prompts response as JSON: {e}")
            return []

        if isinstance(parsed, dict):
            parsed = parsed.get("prompts")
        if not isinstance(parsed, list):
            return []
        return [p.strip() for p in parsed if isinstance(p, str) and p.strip()]

    @staticmethod
    def _build_prompt(analysis: WebsiteAnalysis, count: int) -> str:
        return f"""You are generating exactly {count} human-like prompts that a real customer would type into ChatGPT to get recommendations for products or services.

Business context:
- Sector: {analysis.sector_of_activity}
- Business type: {analysis.business_type}
- Description: {analysis.business_description}
- Website structure: {analysis.website_structure}

Generate exactly {count} diverse, natural prompts that such a customer would use to find product recommendations in the same space (e.g. "Best project management software for small teams", "Top CRM for startups"). Each prompt should be one sentence, as if typed into a search or chat.

Critical: Do NOT mention the name of the website, the business name, or any brand or company name that could identify this business. Write only generic, category-level prompts as if the user does not know the brand.

Return ONLY a JSON object of the form {{"prompts": ["...", "..."]}}, no additional text."""
