"""
Site crawler
Bounded breadth-first traversal of a site's same-origin pages, producing extracted page text.
"""

import logging
import re
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Set

import httpx
from bs4 import BeautifulSoup

from schemas.domain import PageContent
from utils.errors import PageFetchFailure
from utils.urls import canonical_link, normalize_seed, resolve_link, same_origin

logger = logging.getLogger(__name__)

MAX_PAGES = 25
FETCH_TIMEOUT = 15.0
MIN_TEXT_LENGTH = 100
USER_AGENT = "GeoVisibilityBot/1.0"

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")
NON_CONTENT_SELECTOR = 'script, style, nav, footer, [role="navigation"]'


@dataclass
class CrawlState:
    """Frontier for a single crawl; never shared between crawls"""
    visited: Set[str] = field(default_factory=set)
    queue: Deque[str] = field(default_factory=deque)

    def enqueue(self, url: str) -> bool:
        if url in self.visited:
            return False
        self.visited.add(url)
        self.queue.append(url)
        return True


class SiteCrawler:
    """Sequential BFS crawler over one origin"""

    def __init__(
        self,
        max_pages: int = MAX_PAGES,
        fetch_timeout: float = FETCH_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.max_pages = max_pages
        self.fetch_timeout = fetch_timeout
        self._client = client

    async def crawl_site(self, seed_url: str, max_pages: Optional[int] = None) -> List[PageContent]:
        """
        Crawl a site breadth-first starting from seed_url.

        Args:
            seed_url: Starting URL; its origin bounds the traversal
            max_pages: Optional override of the page cap for this crawl

        Returns:
            Pages with more than MIN_TEXT_LENGTH characters of text, in crawl order.
            Empty when nothing could be extracted.
        """
        limit = max_pages if max_pages is not None else self.max_pages
        base = normalize_seed(seed_url)
        if not base:
            logger.warning(f"Not a crawlable URL: {seed_url!r}")
            return []

        if self._client is not None:
            return await self._crawl(self._client, base, limit)

        async with httpx.AsyncClient(
            timeout=self.fetch_timeout,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            return await self._crawl(client, base, limit)

    async def _crawl(self, client: httpx.AsyncClient, base: str, limit: int) -> List[PageContent]:
        state = CrawlState()
        state.enqueue(base)
        results: List[PageContent] = []

        while state.queue and len(results) < limit:
            url = state.queue.popleft()
            try:
                html = await self._fetch_html(client, url)
                soup = BeautifulSoup(html, "html.parser")
            except PageFetchFailure as e:
                logger.debug(f"Skipping page {e}")
                continue

            text = self.extract_text(soup)
            if len(text) > MIN_TEXT_LENGTH:
                results.append(PageContent(url=url, text=text))

            for link in self.discover_links(soup, base):
                state.enqueue(link)

        logger.info(f"Crawled {base}: {len(results)} pages kept, {len(state.visited)} URLs discovered")
        return results

    async def _fetch_html(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url, timeout=self.fetch_timeout)
        except httpx.HTTPError as e:
            raise PageFetchFailure(url, f"{type(e).__name__}: {e}")

        if not response.is_success:
            raise PageFetchFailure(url, f"status {response.status_code}")

        content_type = response.headers.get("content-type", "").lower()
        if not any(t in content_type for t in HTML_CONTENT_TYPES):
            raise PageFetchFailure(url, f"content type {content_type or 'missing'}")

        try:
            return response.text
        except (UnicodeDecodeError, LookupError) as e:
            raise PageFetchFailure(url, f"undecodable body: {e}")

    @staticmethod
    def extract_text(soup: BeautifulSoup) -> str:
        """Drop scripts, styles and navigation chrome, then collapse whitespace."""
        for element in soup.select(NON_CONTENT_SELECTOR):
            element.decompose()
        root = soup.body or soup
        return re.sub(r"\s+", " ", root.get_text(" ")).strip()

    @staticmethod
    def discover_links(soup: BeautifulSoup, base: str) -> List[str]:
        """Same-origin links from the page, resolved against the seed."""
        links = []
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href or href.startswith("#") or href.lower().startswith("mailto:"):
                continue
            absolute = resolve_link(base, href)
            if absolute and same_origin(base, absolute):
                links.append(canonical_link(absolute))
        return links
