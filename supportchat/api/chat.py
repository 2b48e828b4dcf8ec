"""
Chat API endpoints - session history, single-shot replies and SSE streaming.
Sessions are identified by an httpOnly cookie.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from ..config import settings
from ..core import StreamRelay
from ..models import (
    MessageRequest, AddMessageRequest, ChatMessage, HistoryResponse, MessageResponse,
    SessionResponse, Suggestion, ChatSettingsResponse, format_sse,
)
from ..sessions import SessionStore
from .deps import get_session_store, get_stream_relay
from .errors import first_error_message, message_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        path="/",
    )


def resolve_session(request: Request, store: SessionStore) -> Tuple[str, bool]:
    """
    Session id from the cookie, or a freshly generated one.

    Returns:
        (session_id, needs_cookie) - needs_cookie is True when the id is new
        or the session behind the cookie no longer exists
    """
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        session_id = store.new_session_id()
        logger.info(f"Created new session ID: {session_id}")
        return session_id, True
    return session_id, store.get(session_id) is None


@router.get("/history", response_model=HistoryResponse)
async def get_chat_history(
    request: Request,
    store: SessionStore = Depends(get_session_store),
):
    """Conversation history of the cookie's session (empty if none or expired)."""
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        return HistoryResponse(messages=[])

    now = datetime.now(timezone.utc)
    messages = [
        ChatMessage(
            id=f"history-{index}",
            text=msg.content,
            sender="user" if msg.role == "user" else "assistant",
            timestamp=now,
        )
        for index, msg in enumerate(store.get_messages(session_id))
    ]
    logger.debug(f"Returning {len(messages)} history messages for session {session_id}")
    return HistoryResponse(messages=messages)


@router.post("/add-message", response_model=SessionResponse)
async def add_message(
    body: AddMessageRequest,
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """Append a turn to the session without generating a reply."""
    session_id, needs_cookie = resolve_session(request, store)
    if needs_cookie:
        set_session_cookie(response, session_id)

    store.add_message(session_id, body.role, body.message)
    return SessionResponse(success=True, session_id=session_id)


@router.post("/message", response_model=MessageResponse)
async def send_message(
    body: MessageRequest,
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
    relay: StreamRelay = Depends(get_stream_relay),
):
    """
    Full round trip without streaming.

    Returns:
        MessageResponse with the assistant's answer
    """
    session_id, needs_cookie = resolve_session(request, store)
    if needs_cookie:
        set_session_cookie(response, session_id)

    answer = await relay.complete(session_id, body.message)
    now = datetime.now(timezone.utc)
    return MessageResponse(id=str(int(now.timestamp() * 1000)), answer=answer, timestamp=now)


def _stream_response(request: Request, message: str, store: SessionStore, relay: StreamRelay) -> StreamingResponse:
    session_id, needs_cookie = resolve_session(request, store)

    async def event_generator():
        async for event in relay.stream_reply(
            session_id, message, is_disconnected=request.is_disconnected
        ):
            yield format_sse(event)

    response = StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
    if needs_cookie:
        set_session_cookie(response, session_id)
    return response


@router.post("/message/stream")
async def stream_message(
    body: MessageRequest,
    request: Request,
    store: SessionStore = Depends(get_session_store),
    relay: StreamRelay = Depends(get_stream_relay),
):
    """Stream the reply as Server-Sent Events."""
    return _stream_response(request, body.message, store, relay)


@router.get("/message/stream")
async def stream_message_get(
    request: Request,
    message: Optional[str] = Query(None),
    store: SessionStore = Depends(get_session_store),
    relay: StreamRelay = Depends(get_stream_relay),
):
    """EventSource-friendly variant taking the message as a query parameter."""
    if not message:
        return message_response(status.HTTP_400_BAD_REQUEST, "Message parameter is required")
    try:
        body = MessageRequest(message=message)
    except ValidationError as e:
        return message_response(status.HTTP_400_BAD_REQUEST, first_error_message(e.errors()))

    return _stream_response(request, body.message, store, relay)


@router.post("/clear-session", response_model=SessionResponse)
async def clear_session(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """Drop the current session (if any) and issue a fresh one."""
    old_session_id = request.cookies.get(settings.session_cookie_name)
    session_id = store.clear(old_session_id)
    set_session_cookie(response, session_id)
    logger.info(f"Cleared session {old_session_id or '-'}, new session {session_id}")
    return SessionResponse(success=True, session_id=session_id)


@router.get("/settings", response_model=ChatSettingsResponse)
async def get_chat_settings(request: Request):
    """Widget settings and suggested opening questions."""
    provider = getattr(request.app.state, "llm_provider", None)
    project_name = settings.project_name
    project_type = settings.project_type

    return ChatSettingsResponse(
        model=provider.model if provider else (settings.ai_model or ""),
        provider=settings.ai_provider,
        max_tokens=settings.max_tokens,
        site_name=settings.resolved_site_name,
        project_name=project_name,
        project_type=project_type,
        suggestions=[
            Suggestion(id=1, text=f"What services does {project_name} offer?", icon="question-circle"),
            Suggestion(id=2, text=f"How do I get started with {project_type}?", icon="rocket"),
            Suggestion(id=3, text="Tell me about pricing tiers", icon="dollar-sign"),
            Suggestion(id=4, text=f"What are the benefits of using {project_name}?", icon="file-contract"),
            Suggestion(id=5, text="How do I contact support?", icon="paper-plane"),
        ],
    )
