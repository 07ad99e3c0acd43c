"""Production configuration and environment settings"""

import os
from dataclasses import dataclass
from typing import List, Optional


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Config:
    """Application configuration from environment variables"""

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    IS_PRODUCTION = ENVIRONMENT == "production"

    # CORS Configuration
    ALLOWED_ORIGINS: List[str] = []
    allowed_origins_env = os.getenv("ALLOWED_ORIGINS")
    if allowed_origins_env:
        ALLOWED_ORIGINS = [origin.strip() for origin in allowed_origins_env.split(",")]
    elif not IS_PRODUCTION:
        # Development fallback - but warn about it
        ALLOWED_ORIGINS = ["*"]

    # API Keys (validated at startup)
    ANTHROPIC_API_KEY: Optional[str] = os.getenv("ANTHROPIC_API_KEY")

    # Models
    GEO_MODEL = os.getenv("GEO_MODEL", "claude-3-5-haiku-20241022")
    SEARCH_MODEL = os.getenv("SEARCH_MODEL", "claude-3-5-haiku-20241022")
    WEB_SEARCH_MAX_USES = _int_env("WEB_SEARCH_MAX_USES", 5)

    # Pipeline
    NUM_SEARCH_PROMPTS = _int_env("NUM_SEARCH_PROMPTS", 10)
    CRAWL_MAX_PAGES = _int_env("CRAWL_MAX_PAGES", 25)
    CRAWL_FETCH_TIMEOUT = _int_env("CRAWL_FETCH_TIMEOUT", 15)
    MAX_CONTENT_CHARS = _int_env("MAX_CONTENT_CHARS", 120_000)
    STRATEGY_MAX_COMPETITORS = _int_env("STRATEGY_MAX_COMPETITORS", 5)
    STRATEGY_PAGES_PER_COMPETITOR = _int_env("STRATEGY_PAGES_PER_COMPETITOR", 3)

    # Rate Limiting
    RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    ANALYSIS_RATE_LIMIT = os.getenv("ANALYSIS_RATE_LIMIT", "10/minute")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    STRUCTURED_LOGGING = os.getenv("STRUCTURED_LOGGING", "true").lower() == "true"

    @classmethod
    def validate(cls):
        """Validate critical configuration at startup"""
        errors = []

        if cls.IS_PRODUCTION and not cls.ALLOWED_ORIGINS:
            errors.append("ALLOWED_ORIGINS must be set in production")

        if not cls.ANTHROPIC_API_KEY:
            errors.append("ANTHROPIC_API_KEY is required")

        if not 1 <= cls.NUM_SEARCH_PROMPTS <= 10:
            errors.append("NUM_SEARCH_PROMPTS should be between 1 and 10 (value will be clamped)")

        return errors

    @classmethod
    def get_summary(cls) -> dict:
        """Get configuration summary for logging (without secrets)"""
        return {
            "environment": cls.ENVIRONMENT,
            "geo_model": cls.GEO_MODEL,
            "search_model": cls.SEARCH_MODEL,
            "num_search_prompts": cls.NUM_SEARCH_PROMPTS,
            "crawl_max_pages": cls.CRAWL_MAX_PAGES,
            "rate_limit_enabled": cls.RATE_LIMIT_ENABLED,
            "cors_origins_count": len(cls.ALLOWED_ORIGINS),
            "structured_logging": cls.STRUCTURED_LOGGING,
        }


@dataclass(frozen=True)
class GeoSettings:
    """Immutable pipeline settings, built once and passed to every service"""
    anthropic_api_key: Optional[str] = None
    geo_model: str = "claude-3-5-haiku-20241022"
    search_model: str = "claude-3-5-haiku-20241022"
    web_search_max_uses: int = 5
    num_search_prompts: int = 10
    crawl_max_pages: int = 25
    crawl_fetch_timeout: float = 15.0
    max_content_chars: int = 120_000
    strategy_max_competitors: int = 5
    strategy_pages_per_competitor: int = 3

    def __post_init__(self):
        # Prompt count is capped at 10 by the prompt generation contract
        object.__setattr__(self, "num_search_prompts", min(10, max(1, self.num_search_prompts)))
        object.__setattr__(self, "crawl_max_pages", max(1, self.crawl_max_pages))

    @classmethod
    def from_config(cls, cfg: "Config") -> "GeoSettings":
        return cls(
            anthropic_api_key=cfg.ANTHROPIC_API_KEY,
            geo_model=cfg.GEO_MODEL,
            search_model=cfg.SEARCH_MODEL,
            web_search_max_uses=cfg.WEB_SEARCH_MAX_USES,
            num_search_prompts=cfg.NUM_SEARCH_PROMPTS,
            crawl_max_pages=cfg.CRAWL_MAX_PAGES,
            crawl_fetch_timeout=float(cfg.CRAWL_FETCH_TIMEOUT),
            max_content_chars=cfg.MAX_CONTENT_CHARS,
            strategy_max_competitors=cfg.STRATEGY_MAX_COMPETITORS,
            strategy_pages_per_competitor=cfg.STRATEGY_PAGES_PER_COMPETITOR,
        )


config = Config()
