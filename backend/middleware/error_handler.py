"""Global error handling for the API"""

import logging
import traceback
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable

from utils.errors import GeoAnalysisError

logger = logging.getLogger(__name__)


async def geo_error_handler(request: Request, exc: GeoAnalysisError) -> JSONResponse:
    """Turn a fatal pipeline error into a single descriptive response"""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} in {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"{type(exc).__name__} in {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "type": exc.error_type
        }
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catch unhandled exceptions and return user-friendly errors"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            response = await call_next(request)
            return response

        except ValueError as e:
            # Bad request errors
            logger.warning(f"ValueError in {request.url.path}: {str(e)}")
            return JSONResponse(
                status_code=400,
                content={
                    "detail": str(e),
                    "type": "validation_error"
                }
            )

        except Exception as e:
            # Catch-all for unexpected errors
            error_id = traceback.format_exc()[-50:]  # Last 50 chars as error ID
            logger.error(
                f"Unhandled exception in {request.url.path}: {type(e).__name__}: {str(e)}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            return JSONResponse(
                status_code=500,
                content={
                    "detail": "An unexpected error occurred. Please try again later.",
                    "type": "internal_error",
                    "error_id": error_id[-12:]  # Short error ID for support
                }
            )
