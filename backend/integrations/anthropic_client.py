"""Anthropic API client factory"""

import logging
from typing import Optional

import anthropic

from utils.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-20241022"


def create_async_anthropic_client(api_key: Optional[str]) -> anthropic.AsyncAnthropic:
    """Create an async Anthropic client, failing fast when no key is configured"""
    if not api_key:
        raise ConfigurationError("ANTHROPIC_API_KEY is not set")
    return anthropic.AsyncAnthropic(api_key=api_key)


def get_default_model() -> str:
    """Get the default Claude model to use"""
    return DEFAULT_MODEL


def upstream_error(service: str, error: anthropic.APIError) -> UpstreamServiceError:
    """Translate an SDK error into an UpstreamServiceError with status and body context"""
    if isinstance(error, anthropic.APIStatusError):
        body = error.response.text if error.response is not None else None
        return UpstreamServiceError(service, error.message, status=error.status_code, body=body)
    return UpstreamServiceError(service, str(error))


def response_text(response) -> str:
    """Concatenate the text blocks of a Messages API response"""
    parts = []
    for block in getattr(response, "content", None) or []:
        text = getattr(block, "text", None)
        if getattr(block, "type", None) == "text" and text:
            parts.append(text)
    return "".join(parts)
