"""Groups cited URLs by domain"""

from collections import Counter
from typing import Dict, Iterable, List, Mapping, Set

from schemas.domain import SourceCategory, SourcesByDomain
from utils.urls import domain_key


def group_sources(urls: Iterable[str]) -> List[SourcesByDomain]:
    """
    Group citation URLs by domain key.

    Counts every occurrence, keeps distinct URLs per domain sorted, and orders
    domains by count (desc) then name (asc). Categories start as OTHER.
    """
    count_by_url = Counter(urls)

    counts: Dict[str, int] = {}
    urls_by_domain: Dict[str, Set[str]] = {}
    for url, count in count_by_url.items():
        domain = domain_key(url)
        counts[domain] = counts.get(domain, 0) + count
        urls_by_domain.setdefault(domain, set()).add(url)

    grouped = [
        SourcesByDomain(domain=domain, count=counts[domain], urls=sorted(urls_by_domain[domain]))
        for domain in counts
    ]
    grouped.sort(key=lambda s: (-s.count, s.domain))
    return grouped


def apply_categories(
    sources: List[SourcesByDomain],
    categories: Mapping[str, SourceCategory],
) -> List[SourcesByDomain]:
    """Return copies of sources with their category set; unmapped domains get OTHER"""
    return [
        s.model_copy(update={"category": categories.get(s.domain, SourceCategory.OTHER)})
        for s in sources
    ]
