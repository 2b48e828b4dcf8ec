"""
OpenRouter LLM Provider.
Talks to the routed chat/completions endpoint over raw HTTP and frames the
event-stream body itself instead of going through an SDK.
"""

import httpx
import json
import logging
import time
from typing import Optional, List, Dict, Any, AsyncIterator

from .base import LLMProvider, LLMMessage, UpstreamError, NO_RESPONSE_TEXT
from .sse import SSELineFramer

logger = logging.getLogger(__name__)


class OpenRouterProvider(LLMProvider):
    """Provider for the OpenRouter aggregation API."""

    name = "openrouter"

    def __init__(
        self,
        api_key: str,
        model: str = "meta-llama/llama-4-maverick:free",
        base_url: str = "https://openrouter.ai/api/v1",
        default_max_tokens: int = 500,
        timeout: float = 120.0,
        site_url: str = "",
        site_name: str = "",
    ):
        super().__init__(api_key, model, base_url, default_max_tokens, timeout)
        self.site_url = site_url
        self.site_name = site_name

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.site_url,
            "X-Title": self.site_name,
            "Content-Type": "application/json",
        }

    def _payload(self, messages: List[LLMMessage], max_tokens: Optional[int], stream: bool) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": self._format_messages(messages),
            "max_tokens": self._max_tokens(max_tokens),
        }
        if stream:
            payload["stream"] = True
        return payload

    async def complete_once(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> str:
        start_time = time.time()
        url = f"{self.base_url}/chat/completions"
        payload = self._payload(messages, max_tokens, stream=False)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload, headers=self._get_headers())
        except httpx.HTTPError as e:
            logger.error(f"LLM API call failed: {str(e)}", exc_info=True)
            raise UpstreamError(self.name, None, str(e)) from e

        logger.debug(f"LLM API response status: {resp.status_code}")
        if resp.status_code >= 400:
            logger.error(
                f"LLM API call failed: HTTP {resp.status_code}",
                extra={"extra_fields": {
                    "provider": self.name,
                    "model": self.model,
                    "status": resp.status_code,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                }}
            )
            raise UpstreamError(self.name, resp.status_code, resp.text)

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise UpstreamError(self.name, resp.status_code, f"Malformed response: {resp.text}") from e

        usage = data.get("usage") or {}
        logger.info(
            "LLM API call completed",
            extra={"extra_fields": {
                "provider": self.name,
                "model": data.get("model", self.model),
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "completion_tokens": usage.get("completion_tokens", 0),
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }}
        )
        return content or NO_RESPONSE_TEXT

    async def complete_streaming(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        start_time = time.time()
        url = f"{self.base_url}/chat/completions"
        payload = self._payload(messages, max_tokens, stream=True)
        framer = SSELineFramer()
        chunk_count = 0
        content_length = 0

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                async with client.stream('POST', url, json=payload, headers=self._get_headers()) as response:
                    if response.status_code >= 400:
                        body = (await response.aread()).decode("utf-8", errors="replace")
                        raise UpstreamError(self.name, response.status_code, body)

                    async for raw in response.aiter_bytes():
                        for data_str in framer.feed(raw):
                            content = self._extract_delta(data_str)
                            if content:
                                chunk_count += 1
                                content_length += len(content)
                                yield content
                        if framer.done:
                            break

                    for data_str in framer.flush():
                        content = self._extract_delta(data_str)
                        if content:
                            chunk_count += 1
                            content_length += len(content)
                            yield content
        except httpx.HTTPError as e:
            logger.error(
                f"LLM API stream failed: {str(e)}",
                exc_info=True,
                extra={"extra_fields": {
                    "provider": self.name,
                    "model": self.model,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                    "error": str(e),
                }}
            )
            raise UpstreamError(self.name, None, str(e)) from e

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

    def _extract_delta(self, data_str: str) -> str:
        """Pull ``choices[0].delta.content`` out of one event payload."""
        try:
            chunk = json.loads(data_str)
        except json.JSONDecodeError:
            logger.warning(f"Skipping malformed stream payload: {data_str[:200]}")
            return ""

        choices = chunk.get("choices") if isinstance(chunk, dict) else None
        if not choices:
            return ""
        delta = choices[0].get("delta") or {}
        return delta.get("content") or ""
