"""Search-and-answer integration: Claude with the server-side web search tool"""

import logging
import time
from typing import List, Optional

import anthropic

from integrations.anthropic_client import get_default_model, upstream_error
from schemas.domain import WebSearchCallResult

logger = logging.getLogger(__name__)

# Keeps the answer short; only the searches and their sources matter
ANSWER_INSTRUCTION = "[Respond with ONLY 'Done' and nothing else.]"

WEB_SEARCH_TOOL_TYPE = "web_search_20250305"


class WebSearchClient:
    """Runs one prompt through Claude with web search and reports queries and cited URLs"""

    def __init__(
        self,
        client: anthropic.AsyncAnthropic,
        model: Optional[str] = None,
        max_uses: int = 5,
    ):
        self.client = client
        self.model = model or get_default_model()
        self.max_uses = max_uses

    async def search_with_citations(self, prompt: str) -> WebSearchCallResult:
        """
        Ask Claude to answer the prompt using web search.

        Raises:
            UpstreamServiceError: On any API failure; no retry
        """
        logger.info(f"[WebSearch] Starting search for prompt: \"{prompt}\"")
        start = time.monotonic()
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=1024,
                messages=[{"role": "user", "content": f"{ANSWER_INSTRUCTION} {prompt}"}],
                tools=[{
                    "type": WEB_SEARCH_TOOL_TYPE,
                    "name": "web_search",
                    "max_uses": self.max_uses,
                }],
                tool_choice={"type": "any"},
            )
        except anthropic.APIError as e:
            raise upstream_error("Anthropic web search", e)

        result = self.parse_response(response)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            f"[WebSearch] Search finished in {elapsed_ms}ms: found {len(result.cited_urls)} sources "
            f"and {len(result.internal_queries)} internal queries."
        )
        return result

    @staticmethod
    def parse_response(response) -> WebSearchCallResult:
        """Pull issued queries and source URLs out of the response content blocks"""
        queries: List[str] = []
        urls: List[str] = []

        for block in getattr(response, "content", None) or []:
            block_type = getattr(block, "type", None)

            if block_type == "server_tool_use" and getattr(block, "name", None) == "web_search":
                tool_input = getattr(block, "input", None) or {}
                query = tool_input.get("query") if isinstance(tool_input, dict) else None
                if isinstance(query, str) and query.strip():
                    queries.append(clean_query(query))

            elif block_type == "web_search_tool_result":
                results = getattr(block, "content", None)
                # An error result is a single object rather than a list
                if not isinstance(results, list):
                    error_code = getattr(results, "error_code", "unknown")
                    logger.warning(f"[WebSearch] Search tool returned an error: {error_code}")
                    continue
                for item in results:
                    url = getattr(item, "url", None)
                    if url:
                        urls.append(url)

        return WebSearchCallResult(internal_queries=queries, cited_urls=urls)


def clean_query(query: str) -> str:
    return query.replace(ANSWER_INSTRUCTION + " ", "").replace(ANSWER_INSTRUCTION, "").strip()
