"""
Unit tests for source grouping and visibility scoring
"""

import unittest
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from schemas.domain import PromptResult, SourceCategory, SourcesByDomain
from services.research.scoring import apparition_likelihood, visibility_score
from services.research.source_aggregator import apply_categories, group_sources
from utils.urls import normalize_for_match


class TestGroupSources(unittest.TestCase):

    def test_groups_by_domain_key_and_counts_occurrences(self):
        urls = [
            "https://www.reddit.com/r/furniture/1",
            "https://reddit.com/r/furniture/2",
            "https://www.reddit.com/r/furniture/1",
            "https://amazon.com/dp/123",
        ]
        grouped = group_sources(urls)

        self.assertEqual([g.domain for g in grouped], ["reddit.com", "amazon.com"])
        reddit = grouped[0]
        self.assertEqual(reddit.count, 3)
        self.assertEqual(reddit.urls, [
            "https://reddit.com/r/furniture/2",
            "https://www.reddit.com/r/furniture/1",
        ])
        self.assertEqual(reddit.category, SourceCategory.OTHER)

    def test_scheme_case_does_not_split_a_domain(self):
        grouped = group_sources(["HTTPS://Example.com/a", "https://example.com/b"])

        self.assertEqual([g.domain for g in grouped], ["example.com"])
        self.assertEqual(grouped[0].count, 2)

    def test_ties_broken_by_domain_name(self):
        grouped = group_sources(["https://zeta.com/a", "https://alpha.com/a", "https://mid.com/a", "https://mid.com/b"])
        self.assertEqual([g.domain for g in grouped], ["mid.com", "alpha.com", "zeta.com"])

    def test_flattened_urls_recover_distinct_input(self):
        urls = [
            "https://a.com/1", "https://a.com/1", "https://www.a.com/2",
            "https://b.org/x?q=1", "not-a-url", "https://c.net",
        ]
        grouped = group_sources(urls)
        flattened = [u for g in grouped for u in g.urls]

        self.assertEqual(sorted(flattened), sorted(set(urls)))
        self.assertEqual(sum(g.count for g in grouped), len(urls))

    def test_empty(self):
        self.assertEqual(group_sources([]), [])

    def test_apply_categories_defaults_to_other(self):
        grouped = group_sources(["https://reddit.com/a", "https://unknown.io/b"])
        categorized = apply_categories(grouped, {"reddit.com": SourceCategory.FORUMS_QA})

        self.assertEqual(categorized[0].category, SourceCategory.FORUMS_QA)
        self.assertEqual(categorized[1].category, SourceCategory.OTHER)
        # Originals are left untouched
        self.assertEqual(grouped[0].category, SourceCategory.OTHER)


class TestScoring(unittest.TestCase):

    def setUp(self):
        self.site = normalize_for_match("https://target.com")

    def test_likelihood_is_binary(self):
        self.assertEqual(apparition_likelihood(["https://other.com", "https://target.com/page"], self.site), 100)
        self.assertEqual(apparition_likelihood(["https://other.com"], self.site), 0)
        self.assertEqual(apparition_likelihood([], self.site), 0)

    def test_subdomain_lookalike_does_not_count(self):
        self.assertEqual(apparition_likelihood(["https://target.company.com/x"], self.site), 0)

    def _results(self, *likelihoods):
        return [PromptResult(prompt=f"p{i}", apparition_likelihood=value) for i, value in enumerate(likelihoods)]

    def test_visibility_score(self):
        self.assertEqual(visibility_score(self._results(100, 0)), 50)
        self.assertEqual(visibility_score(self._results(100, 100, 100)), 100)
        self.assertEqual(visibility_score(self._results(0, 0)), 0)

    def test_visibility_score_rounds_half_up(self):
        self.assertEqual(visibility_score(self._results(100, 0, 0)), 33)
        self.assertEqual(visibility_score(self._results(100, 100, 0)), 67)
        self.assertEqual(visibility_score(self._results(*([100] + [0] * 7))), 13)  # 12.5

    def test_visibility_score_without_prompts(self):
        self.assertEqual(visibility_score([]), 0)


if __name__ == '__main__':
    unittest.main()
