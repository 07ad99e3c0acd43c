"""
Domain Category Classification
Categorizes cited domains (social media, shopping, forums, reviews, news) with one batched Claude call.
"""
import json
import logging
from typing import Dict, Iterable, List

import anthropic

from integrations.anthropic_client import get_default_model, response_text
from schemas.domain import SourceCategory
from utils.errors import ClassificationFailure
from utils.llm_json import parse_json_response

logger = logging.getLogger(__name__)


class DomainClassifier:
    """Classifies domains into SourceCategory values; never fails the caller."""

    def __init__(self, client: anthropic.AsyncAnthropic, model: str = None):
        self.client = client
        self.model = model or get_default_model()

    async def classify(self, domains: Iterable[str]) -> Dict[str, SourceCategory]:
        """
        Classify domains in a single request.

        Args:
            domains: Domain keys, most referenced first

        Returns:
            Mapping of normalized domain to category. Empty if the input is empty
            or classification failed; callers default unmapped domains to OTHER.
        """
        domain_list = list(dict.fromkeys(domains))
        if not domain_list:
            return {}

        logger.info(f"Classifying {len(domain_list)} domains...")
        try:
            raw = await self._request_categories(domain_list)
        except ClassificationFailure as e:
            logger.warning(f"Domain classifier failed, using other for all: {e}")
            return {}
        except Exception as e:
            logger.warning(f"Domain classifier failed unexpectedly, using other for all: {type(e).__name__}: {e}")
            return {}

        categories = self._normalize(raw)
        logger.info(f"Domain classification complete: {len(categories)} domains mapped")
        return categories

    async def _request_categories(self, domains: List[str]) -> Dict[str, object]:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=2048,
                temperature=0,
                messages=[{"role": "user", "content": self._build_prompt(domains)}],
            )
        except anthropic.APIError as e:
            raise ClassificationFailure(f"Anthropic error: {e}") from e

        text = response_text(response)
        if not text:
            raise ClassificationFailure("No text content in classification response")

        try:
            parsed = parse_json_response(text)
        except json.JSONDecodeError as e:
            raise ClassificationFailure(f"Unparsable classification response: {e}") from e

        if not isinstance(parsed, dict):
            raise ClassificationFailure(f"Expected a JSON object, got {type(parsed).__name__}")
        return parsed

    @staticmethod
    def _build_prompt(domains: List[str]) -> str:
        categories = ", ".join(c.value for c in SourceCategory)
        domain_list = "\n".join(domains)
        return (
            f"Classify each of these website domains into exactly one of: {categories}. "
            "Use only the domain name. Domains are listed in display order (most referred first). "
            "Return a JSON object mapping each domain to its category, e.g. "
            '{"reddit.com": "forums_qa", "amazon.com": "shopping"}. No other text.'
            f"\n\n{domain_list}"
        )

    @staticmethod
    def _normalize(raw: Dict[str, object]) -> Dict[str, SourceCategory]:
        out: Dict[str, SourceCategory] = {}
        for key, value in raw.items():
            domain = str(key).lower().strip()
            if domain.startswith("www."):
                domain = domain[4:]
            out[domain] = SourceCategory.coerce(value)
        return out
