"""
OpenAI Provider - direct chat-completion calls through the official SDK.
Also the base for OpenAI-compatible endpoints reached with a custom base_url.
"""

import logging
import time
from typing import Optional, List, Dict, Any, AsyncIterator

import openai
from openai import AsyncOpenAI

from .base import LLMProvider, LLMMessage, UpstreamError, NO_RESPONSE_TEXT

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Provider for the OpenAI chat/completions API."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: Optional[str] = None,
        default_max_tokens: int = 500,
        timeout: float = 120.0,
    ):
        super().__init__(api_key, model, base_url, default_max_tokens, timeout)
        client_params: Dict[str, Any] = {"api_key": api_key, "timeout": timeout}
        if base_url:
            client_params["base_url"] = base_url
        self.client = AsyncOpenAI(**client_params)

    def _wrap_error(self, e: Exception) -> UpstreamError:
        if isinstance(e, openai.APIStatusError):
            return UpstreamError(self.name, e.status_code, e.message)
        return UpstreamError(self.name, None, str(e))

    async def _request_completion(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
        **params
    ) -> str:
        """Single-shot request; returns the raw (possibly empty) content."""
        start_time = time.time()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"LLM API call starting: provider={self.name}, model={self.model}, "
                f"{len(messages)} messages"
            )

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=self._format_messages(messages),
                max_tokens=self._max_tokens(max_tokens),
                **params,
            )
        except openai.APIError as e:
            logger.error(
                f"LLM API call failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": self.name,
                    "model": self.model,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error": str(e),
                }}
            )
            raise self._wrap_error(e) from e

        content = response.choices[0].message.content or ""
        usage = response.usage
        logger.info(
            "LLM API call completed",
            extra={"extra_fields": {
                "provider": self.name,
                "model": self.model,
                "prompt_tokens": getattr(usage, "prompt_tokens", 0),
                "completion_tokens": getattr(usage, "completion_tokens", 0),
                "duration_ms": round((time.time() - start_time) * 1000, 2),
                "content_length": len(content),
            }}
        )
        return content

    async def complete_once(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> str:
        content = await self._request_completion(messages, max_tokens)
        return content or NO_RESPONSE_TEXT

    async def complete_streaming(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Stream ``choices[0].delta.content`` fragments."""
        start_time = time.time()
        chunk_count = 0
        content_length = 0

        try:
            stream = await self.client.chat.completions.create(
                model=self.model,
                messages=self._format_messages(messages),
                max_tokens=self._max_tokens(max_tokens),
                stream=True,
            )
            try:
                async for chunk in stream:
                    if not chunk.choices:
                        continue
                    content = chunk.choices[0].delta.content
                    if content:
                        chunk_count += 1
                        content_length += len(content)
                        yield content
            finally:
                await stream.close()
        except openai.APIError as e:
            logger.error(
                f"LLM API stream failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": self.name,
                    "model": self.model,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "chunks": chunk_count,
                    "error": str(e),
                }}
            )
            raise self._wrap_error(e) from e

        logger.info(
            "LLM API stream completed",
            extra={"extra_fields": {
                "provider": self.name,
                "model": self.model,
                "chunks": chunk_count,
                "content_length": content_length,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }}
        )
