"""Common error classes for the GEO analysis pipeline"""

from typing import Optional


class GeoAnalysisError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = 500
    error_type = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ConfigurationError(GeoAnalysisError):
    """A credential or setting needed to call an external service is missing"""
    status_code = 503
    error_type = "configuration_error"


class ExtractionFailure(GeoAnalysisError):
    """Crawling produced no usable page content"""
    status_code = 422
    error_type = "extraction_failure"

    def __init__(self, detail: str = "Could not extract any content from the website"):
        super().__init__(detail)


class PromptGenerationError(GeoAnalysisError):
    """Text generation returned no search prompts"""
    status_code = 502
    error_type = "prompt_generation_failure"

    def __init__(self, detail: str = "Failed to generate search prompts"):
        super().__init__(detail)


class UpstreamServiceError(GeoAnalysisError):
    """Non-success response or transport failure from an external service"""
    status_code = 502
    error_type = "upstream_error"

    def __init__(self, service: str, detail: str, status: Optional[int] = None, body: Optional[str] = None):
        message = f"{service} error"
        if status is not None:
            message += f": {status}"
        message += f" {detail}"
        if body:
            message += f" {body[:500]}"
        super().__init__(message)
        self.service = service
        self.status = status
        self.body = body


class ClassificationFailure(Exception):
    """Domain categorization failed; callers fall back to 'other'"""
    pass


class PageFetchFailure(Exception):
    """A single crawled page could not be fetched or parsed"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class MalformedUrl(ValueError):
    """URL could not be parsed into scheme and host"""
    pass
