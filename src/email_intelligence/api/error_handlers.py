"""
FastAPI exception handlers for structured error responses.

Maps the service's error taxonomy to HTTP status codes. Every body has the
same shape: error code, message, details, timestamp.
"""

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from email_intelligence.analysis.exceptions import BatchSizeExceededError
from email_intelligence.llm.exceptions import (
    ConfigurationError,
    ProviderAuthenticationError,
    ProviderCallError,
    ProviderRateLimitError,
    ProviderTimeoutError,
    UnsupportedProviderError,
)
from email_intelligence.sources.exceptions import UpstreamFetchError
from email_intelligence.validation.exceptions import SchemaValidationError

logger = structlog.get_logger(__name__)


def _error_response(
    status_code: int, error: str, message: str, details: dict[str, Any] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": details or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Missing credentials: a deployment problem, not the caller's."""
    logger.error("Configuration error", error=exc.message, details=exc.details)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "configuration_error", exc.message, exc.details
    )


async def unsupported_provider_handler(
    request: Request, exc: UnsupportedProviderError
) -> JSONResponse:
    logger.error("Unsupported provider", error=exc.message, details=exc.details)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "unsupported_provider", exc.message, exc.details
    )


async def schema_validation_error_handler(
    request: Request, exc: SchemaValidationError
) -> JSONResponse:
    """The model answered, but not in the required shape: 502."""
    logger.warning("Invalid model output", error=exc.message, details=exc.details)
    return _error_response(
        status.HTTP_502_BAD_GATEWAY, "invalid_model_output", exc.message, exc.details
    )


async def provider_call_error_handler(request: Request, exc: ProviderCallError) -> JSONResponse:
    """
    Vendor failures.

    Timeout maps to 504, rate limit to 429, everything else to 502. Vendor
    error bodies stay in the logs and are not echoed to the client.
    """
    logger.error(
        "LLM provider call failed",
        error_type=type(exc).__name__,
        error=exc.message,
        vendor=exc.details.get("vendor"),
        status=exc.details.get("status"),
    )
    public_details = {k: v for k, v in exc.details.items() if k in ("vendor", "model", "status")}

    if isinstance(exc, ProviderTimeoutError):
        return _error_response(
            status.HTTP_504_GATEWAY_TIMEOUT, "provider_timeout", exc.message, public_details
        )
    if isinstance(exc, ProviderRateLimitError):
        return _error_response(
            status.HTTP_429_TOO_MANY_REQUESTS, "provider_rate_limited", exc.message, public_details
        )
    if isinstance(exc, ProviderAuthenticationError):
        return _error_response(
            status.HTTP_502_BAD_GATEWAY, "provider_auth_failed", exc.message, public_details
        )
    return _error_response(
        status.HTTP_502_BAD_GATEWAY, "provider_unavailable", exc.message, public_details
    )


async def upstream_fetch_error_handler(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    logger.warning(
        "Email data fetch failed",
        resource_id=exc.resource_id,
        not_found=exc.not_found,
        error=exc.message,
    )
    if exc.not_found:
        return _error_response(
            status.HTTP_404_NOT_FOUND, "email_not_found", exc.message, exc.details
        )
    return _error_response(
        status.HTTP_502_BAD_GATEWAY, "upstream_fetch_failed", exc.message, exc.details
    )


async def batch_size_error_handler(request: Request, exc: BatchSizeExceededError) -> JSONResponse:
    logger.info("Batch rejected", requested=exc.requested, limit=exc.limit)
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "batch_too_large", exc.message, exc.details
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    ConfigurationError: configuration_error_handler,
    UnsupportedProviderError: unsupported_provider_handler,
    SchemaValidationError: schema_validation_error_handler,
    ProviderCallError: provider_call_error_handler,
    UpstreamFetchError: upstream_fetch_error_handler,
    BatchSizeExceededError: batch_size_error_handler,
    Exception: generic_error_handler,
}
