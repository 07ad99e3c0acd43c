"""Rate limiting utilities"""

from fastapi import Request
from slowapi import Limiter

from config import config


def get_client_key(request: Request) -> str:
    """Rate limit key: the socket peer IP (uvicorn --proxy-headers rewrites it behind a trusted proxy)"""
    client_ip = request.client.host if request.client else "unknown"
    return f"ip_{client_ip}"


# Shared limiter instance - can be imported by route modules and app factory
limiter = Limiter(key_func=get_client_key, enabled=config.RATE_LIMIT_ENABLED)
