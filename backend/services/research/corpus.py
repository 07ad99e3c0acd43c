"""Assembles crawled pages into a single bounded corpus for analysis"""

from typing import List

from schemas.domain import PageContent

MAX_CONTENT_CHARS = 120_000
TRUNCATION_MARKER = "\n...[truncated]"
# Room left for the marker when a block gets cut
TRUNCATION_HEADROOM = 50


def content_for_analysis(pages: List[PageContent], max_chars: int = MAX_CONTENT_CHARS) -> str:
    """Concatenate page contents for the LLM, truncating once the budget is reached"""
    out = ""
    for page in pages:
        block = f"\n--- Page: {page.url} ---\n{page.text}\n"
        if len(out) + len(block) > max_chars:
            out += block[:max(0, max_chars - len(out) - TRUNCATION_HEADROOM)]
            out += TRUNCATION_MARKER
            break
        out += block
    return out.strip()
