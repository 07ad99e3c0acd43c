"""
Unit tests for DomainClassifier
"""

import unittest
import sys
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import anthropic
import httpx

# Add backend to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

from schemas.domain import SourceCategory
from services.research.domain_classifier import DomainClassifier


def text_response(text):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


def make_client(**create_kwargs):
    client = Mock()
    client.messages.create = AsyncMock(**create_kwargs)
    return client


class TestDomainClassifier(unittest.IsolatedAsyncioTestCase):

    async def test_empty_input_makes_no_call(self):
        client = make_client()
        classifier = DomainClassifier(client)

        self.assertEqual(await classifier.classify([]), {})
        client.messages.create.assert_not_called()

    async def test_single_batched_call_with_domains_in_order(self):
        client = make_client(return_value=text_response(
            '{"reddit.com": "forums_qa", "amazon.com": "shopping", "nytimes.com": "news_press"}'
        ))
        classifier = DomainClassifier(client, model="test-model")

        result = await classifier.classify(["reddit.com", "amazon.com", "nytimes.com"])

        self.assertEqual(result, {
            "reddit.com": SourceCategory.FORUMS_QA,
            "amazon.com": SourceCategory.SHOPPING,
            "nytimes.com": SourceCategory.NEWS_PRESS,
        })
        client.messages.create.assert_awaited_once()
        kwargs = client.messages.create.await_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        prompt = kwargs["messages"][0]["content"]
        self.assertTrue(prompt.endswith("reddit.com\namazon.com\nnytimes.com"))

    async def test_keys_normalized_and_unknown_values_coerced(self):
        client = make_client(return_value=text_response(
            '```json\n{"WWW.YouTube.com": "social_media", "wirecutter.com": "Review_Editorial", "mystery.io": "blog"}\n```'
        ))
        classifier = DomainClassifier(client)

        result = await classifier.classify(["youtube.com", "wirecutter.com", "mystery.io"])

        self.assertEqual(result["youtube.com"], SourceCategory.SOCIAL_MEDIA)
        self.assertEqual(result["wirecutter.com"], SourceCategory.REVIEW_EDITORIAL)
        self.assertEqual(result["mystery.io"], SourceCategory.OTHER)

    async def test_api_error_returns_empty_map(self):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.APIStatusError(
            "overloaded", response=httpx.Response(529, request=request, text="overloaded"), body=None
        )
        classifier = DomainClassifier(make_client(side_effect=error))

        self.assertEqual(await classifier.classify(["reddit.com"]), {})

    async def test_unparsable_or_wrong_shape_returns_empty_map(self):
        for text in ["I think reddit is a forum.", '["forums_qa"]', ""]:
            classifier = DomainClassifier(make_client(return_value=text_response(text)))
            self.assertEqual(await classifier.classify(["reddit.com"]), {}, text)

    async def test_unexpected_exception_returns_empty_map(self):
        classifier = DomainClassifier(make_client(side_effect=RuntimeError("boom")))

        self.assertEqual(await classifier.classify(["reddit.com"]), {})


class TestSourceCategory(unittest.TestCase):

    def test_coerce(self):
        self.assertEqual(SourceCategory.coerce("shopping"), SourceCategory.SHOPPING)
        self.assertEqual(SourceCategory.coerce(" NEWS_PRESS "), SourceCategory.NEWS_PRESS)
        self.assertEqual(SourceCategory.coerce("marketplace"), SourceCategory.OTHER)
        self.assertEqual(SourceCategory.coerce(None), SourceCategory.OTHER)
        self.assertEqual(SourceCategory.coerce(3), SourceCategory.OTHER)


if __name__ == '__main__':
    unittest.main()
