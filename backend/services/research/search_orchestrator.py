"""Concurrent fan-out of web search calls, one per generated prompt"""

import asyncio
import logging
import time
from typing import List, Protocol

from schemas.domain import WebSearchCallResult

logger = logging.getLogger(__name__)


class SearchService(Protocol):
    async def search_with_citations(self, prompt: str) -> WebSearchCallResult:
        ...


class SearchOrchestrator:
    """Runs every prompt concurrently and joins fail-fast"""

    def __init__(self, search_service: SearchService):
        self.search_service = search_service

    async def run_all(self, prompts: List[str]) -> List[WebSearchCallResult]:
        """
        Search every prompt concurrently.

        Results come back in the same order as prompts. If any call fails, the
        remaining calls are cancelled and that error is raised; there are no
        partial results.
        """
        if not prompts:
            return []

        logger.info(f"Firing {len(prompts)} concurrent web search calls...")
        start = time.monotonic()
        tasks = [asyncio.create_task(self.search_service.search_with_citations(p)) for p in prompts]

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            await self._cancel(tasks)
            raise

        failed = next((t for t in tasks if t in done and t.exception() is not None), None)
        if failed is not None:
            await self._cancel(pending)
            logger.error(f"Web search fan-out aborted after {len(done)}/{len(tasks)} calls completed")
            raise failed.exception()

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"All {len(prompts)} web search calls finished in {elapsed_ms}ms")
        return [task.result() for task in tasks]

    @staticmethod
    async def _cancel(tasks) -> None:
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
