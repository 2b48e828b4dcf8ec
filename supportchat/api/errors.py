"""
Exception handlers - map validation and upstream failures to JSON bodies of
the form ``{"message": ...}``.
"""

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..llm.base import UpstreamError, ProviderNotConfigured

logger = logging.getLogger(__name__)

UPSTREAM_FAILURE_MESSAGE = "Failed to process your message"


def first_error_message(errors: Sequence[Dict[str, Any]]) -> str:
    """Human-readable message of the first pydantic error."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    ctx_error = (error.get("ctx") or {}).get("error")
    if ctx_error:
        return str(ctx_error)
    return error.get("msg", "Invalid request")


def message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = first_error_message(exc.errors())
    logger.info(f"Rejected invalid request to {request.url.path}: {message}")
    return message_response(status.HTTP_400_BAD_REQUEST, message)


async def upstream_exception_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(
        f"Upstream failure on {request.url.path}: {exc}",
        extra={"extra_fields": {
            "provider": exc.provider,
            "upstream_status": exc.status,
        }}
    )
    return message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, UPSTREAM_FAILURE_MESSAGE)


async def provider_not_configured_handler(request: Request, exc: ProviderNotConfigured) -> JSONResponse:
    logger.error(f"Provider not configured: {exc}")
    return message_response(status.HTTP_503_SERVICE_UNAVAILABLE, "The AI service is not configured")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(UpstreamError, upstream_exception_handler)
    app.add_exception_handler(ProviderNotConfigured, provider_not_configured_handler)
