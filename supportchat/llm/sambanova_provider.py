"""
SambaNova LLM Provider.

OpenAI-compatible endpoint whose streaming mode sometimes delivers the whole
answer as a single chunk. When that happens the stream is discarded, the same
request is re-issued without streaming, and the answer is re-chunked locally
and released with a small delay between pieces.
"""

import logging
from contextlib import aclosing
from typing import Optional, List, AsyncIterator

from .base import LLMMessage, UpstreamError
from .openai_provider import OpenAIProvider
from .simulation import split_for_simulation, paced

logger = logging.getLogger(__name__)


class SambaNovaProvider(OpenAIProvider):
    """Provider for the SambaNova Cloud API with simulated-streaming fallback."""

    name = "sambanova"

    def __init__(
        self,
        api_key: str,
        model: str = "Meta-Llama-3.1-8B-Instruct",
        base_url: str = "https://api.sambanova.ai/v1",
        default_max_tokens: int = 500,
        timeout: float = 120.0,
        chunk_delay: float = 0.05,
        words_per_chunk: int = 10,
        fallback_temperature: float = 0.7,
    ):
        super().__init__(api_key, model, base_url, default_max_tokens, timeout)
        self.chunk_delay = chunk_delay
        self.words_per_chunk = words_per_chunk
        self.fallback_temperature = fallback_temperature

    async def complete_streaming(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """
        Stream with a two-tier fallback.

        The first delta is held back until a second one arrives, so a stream
        that collapses into one chunk is never exposed to the consumer. Such a
        stream, or one that fails before anything was released, is replaced
        by a simulated stream of the non-streaming answer.
        """
        held: Optional[str] = None
        released = False

        try:
            async with aclosing(super().complete_streaming(messages, max_tokens)) as deltas:
                async for delta in deltas:
                    if released:
                        yield delta
                    elif held is None:
                        held = delta
                    else:
                        released = True
                        first, held = held, None
                        yield first
                        yield delta
        except UpstreamError as e:
            if released:
                raise
            logger.warning(f"SambaNova stream failed, falling back to simulated streaming: {e}")
        else:
            if released or held is None:
                return
            logger.info("SambaNova stream delivered a single chunk, falling back to simulated streaming")

        async with aclosing(self._simulated_stream(messages, max_tokens)) as pieces:
            async for piece in pieces:
                yield piece

    async def _simulated_stream(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int],
    ) -> AsyncIterator[str]:
        text = await self._request_completion(
            messages, max_tokens, temperature=self.fallback_temperature
        )
        pieces = split_for_simulation(text, self.words_per_chunk)
        logger.info(
            f"Simulating streaming with {len(pieces)} chunks",
            extra={"extra_fields": {
                "provider": self.name,
                "content_length": len(text),
                "chunks": len(pieces),
            }}
        )
        async for piece in paced(pieces, self.chunk_delay):
            yield piece
