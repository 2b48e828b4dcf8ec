"""
Stream Relay - Runs one chat turn against the active provider and translates
its deltas into the client-facing event protocol.
"""

import logging
from contextlib import aclosing
from datetime import datetime
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Optional

from ..llm.base import LLMProvider
from ..models.stream import StartEvent, ChunkEvent, EndEvent, ErrorEvent, StreamEvent
from ..sessions import SessionStore, utc_now
from .logging_config import SessionLoggerAdapter
from .prompt_assembler import PromptAssembler

logger = logging.getLogger(__name__)

STREAM_ERROR_MESSAGE = "Failed to generate a streaming response"


class RelayState(str, Enum):
    IDLE = "idle"
    STARTED = "started"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


class StreamRelay:
    """
    Orchestrates prompt assembly, the provider call and session commits.

    The assistant turn is persisted only when a reply completes; a failed or
    abandoned stream leaves no assistant entry behind.
    """

    def __init__(
        self,
        store: SessionStore,
        assembler: PromptAssembler,
        provider: LLMProvider,
        max_tokens: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.assembler = assembler
        self.provider = provider
        self.max_tokens = max_tokens
        self._clock = clock

    def _message_id(self) -> str:
        return str(int(self._clock().timestamp() * 1000))

    def _commit(self, session_id: str, content: str, included_knowledge_base: bool) -> None:
        self.store.add_message(session_id, "assistant", content)
        if included_knowledge_base:
            self.store.mark_kb_sent(session_id)

    async def stream_reply(
        self,
        session_id: str,
        message: str,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Generate a reply as a sequence of stream events.

        Args:
            session_id: Session the turn belongs to
            message: The user's message
            is_disconnected: Awaited before each upstream read; when it
                returns True the upstream stream is closed and nothing more
                is emitted or persisted

        Yields:
            StartEvent, then ChunkEvents, then one EndEvent or ErrorEvent
        """
        log = SessionLoggerAdapter(logger, {"session_id": session_id, "provider": self.provider.name})
        state = RelayState.IDLE
        message_id = self._message_id()

        state = RelayState.STARTED
        yield StartEvent(id=message_id)

        accumulated = []
        try:
            prompt = await self.assembler.build(session_id, message)
            state = RelayState.STREAMING
            log.debug(f"Relay {message_id} streaming")

            async with aclosing(self.provider.complete_streaming(prompt.messages, self.max_tokens)) as deltas:
                while True:
                    if is_disconnected is not None and await is_disconnected():
                        log.info(
                            f"Client disconnected, abandoning relay {message_id}",
                            extra={"extra_fields": {"chunks": len(accumulated)}}
                        )
                        return
                    try:
                        delta = await deltas.__anext__()
                    except StopAsyncIteration:
                        break
                    if not delta:
                        continue
                    accumulated.append(delta)
                    yield ChunkEvent(id=message_id, content=delta)

            full_content = "".join(accumulated)
            self._commit(session_id, full_content, prompt.includes_knowledge_base)
            state = RelayState.COMPLETED
        except Exception as e:
            failed_in, state = state, RelayState.FAILED
            log.error(
                f"Relay {message_id} failed while {failed_in.value}: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {"chunks": len(accumulated), "error": str(e)}}
            )
            yield ErrorEvent(error=STREAM_ERROR_MESSAGE)
            return

        log.info(
            f"Relay {message_id} {state.value}",
            extra={"extra_fields": {"chunks": len(accumulated), "content_length": len(full_content)}}
        )
        yield EndEvent(id=message_id, full_content=full_content)

    async def complete(self, session_id: str, message: str) -> str:
        """
        Single-shot reply without the event protocol.

        Raises:
            UpstreamError: If the provider call fails; nothing is persisted
        """
        prompt = await self.assembler.build(session_id, message)
        answer = await self.provider.complete_once(prompt.messages, self.max_tokens)
        self._commit(session_id, answer, prompt.includes_knowledge_base)
        logger.info(
            f"Reply completed for session {session_id}",
            extra={"extra_fields": {
                "session_id": session_id,
                "provider": self.provider.name,
                "content_length": len(answer),
            }}
        )
        return answer

    async def analyze_document(self, document_text: str) -> str:
        """Summarize a document; no session state is involved."""
        messages = self.assembler.build_document_analysis(document_text)
        return await self.provider.complete_once(messages, self.max_tokens)
