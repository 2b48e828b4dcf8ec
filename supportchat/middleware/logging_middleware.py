"""
ASGI middleware for logging API requests and responses.

Pure ASGI (not BaseHTTPMiddleware) so that StreamingResponse bodies pass
through untouched. JSON bodies are sanitized and truncated before logging;
event-stream bodies are never buffered, only their frames are counted.
"""

import json
import logging
import time
from typing import Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_LOGGED_BODY = 5000


def _sanitize_body(data: bytes) -> str:
    """Decode a body, mask credential-like fields if it is JSON, and truncate."""
    text = data.decode("utf-8", errors="ignore")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=MAX_LOGGED_BODY)
    return truncate_large_data(
        json.dumps(filter_sensitive_data(payload), ensure_ascii=False),
        max_length=MAX_LOGGED_BODY,
    )


def _extract_error_reason(response_text: str) -> Optional[str]:
    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError:
        return truncate_large_data(response_text, max_length=500) if response_text else None
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            if payload.get(key):
                return str(payload[key])
    return truncate_large_data(response_text, max_length=500)


class RequestLoggingMiddleware:
    """Logs method, path, status, duration and (sanitized) bodies of each request."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths that are passed through without logging
        """
        self.app = app
        self.exclude_paths = exclude_paths or ["/health", "/"]

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        request_id = id(scope)
        client = scope.get("client")

        body_chunks = []
        response_chunks = []
        status_code = 0
        is_event_stream = False
        sse_frames = 0

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                body_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code, is_event_stream, sse_frames
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                for key, value in message.get("headers", []):
                    if key.lower() == b"content-type" and value.startswith(b"text/event-stream"):
                        is_event_stream = True
            elif message["type"] == "http.response.body":
                body = message.get("body", b"")
                if is_event_stream:
                    sse_frames += body.count(b"\n\n")
                else:
                    response_chunks.append(body)
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "client": client[0] if client else None,
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path} - {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "duration_ms": (time.time() - start_time) * 1000,
                    "error": str(e),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = b"".join(body_chunks)
        request_body_text = _sanitize_body(request_body) if request_body else None
        response_body_text = None
        if response_chunks:
            response_body = b"".join(response_chunks)
            response_body_text = _sanitize_body(response_body) if response_body else None

        error_reason = _extract_error_reason(response_body_text or "") if status_code >= 400 else None

        if status_code < 400:
            log_level = logging.INFO
        elif status_code < 500:
            log_level = logging.WARNING
        else:
            log_level = logging.ERROR

        summary = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if is_event_stream:
            summary += f" | sse_frames={sse_frames}"
        if error_reason:
            summary += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            summary,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "request_body": request_body_text,
                "response_body": response_body_text,
                "sse_frames": sse_frames if is_event_stream else None,
                "error_reason": error_reason,
            }}
        )
