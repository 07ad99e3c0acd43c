"""Visibility scoring from observed citations"""

import math
from typing import Iterable, List

from schemas.domain import PromptResult
from utils.urls import url_matches

PRESENT = 100
ABSENT = 0


def apparition_likelihood(cited_urls: Iterable[str], normalized_site: str) -> int:
    """100 if any cited URL belongs to the site, else 0"""
    return PRESENT if any(url_matches(url, normalized_site) for url in cited_urls) else ABSENT


def visibility_score(prompt_results: List[PromptResult]) -> int:
    """Percentage of prompts where the site was cited, rounded half up"""
    if not prompt_results:
        return 0
    hits = sum(1 for pr in prompt_results if pr.apparition_likelihood == PRESENT)
    return int(math.floor(100 * hits / len(prompt_results) + 0.5))
