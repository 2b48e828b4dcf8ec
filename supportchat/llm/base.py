"""
LLM Provider Base - Capability interface shared by all chat-completion providers.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, AsyncIterator
from dataclasses import dataclass

NO_RESPONSE_TEXT = "I'm sorry, I couldn't generate a response."


@dataclass
class LLMMessage:
    """A message in the conversation sent upstream."""
    role: str  # "system", "user", "assistant"
    content: str

    @staticmethod
    def text(role: str, text: str) -> "LLMMessage":
        return LLMMessage(role=role, content=text)


class UpstreamError(Exception):
    """Non-2xx response or transport failure from an upstream provider."""

    def __init__(self, provider: str, status: Optional[int] = None, body: str = ""):
        self.provider = provider
        self.status = status
        self.body = body
        detail = f"HTTP {status}" if status is not None else "transport error"
        super().__init__(f"{provider} API error ({detail}): {body}")


class ProviderNotConfigured(Exception):
    """No API key is available for the selected provider."""


class LLMProvider(ABC):
    """
    Abstract base class for chat-completion providers.

    Every provider offers a single-shot call and a streamed call. Both raise
    UpstreamError on failure.
    """

    name: str = "base"

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None,
                 default_max_tokens: int = 500, timeout: float = 120.0):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.default_max_tokens = default_max_tokens
        self.timeout = timeout

    @abstractmethod
    async def complete_once(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Request a full completion.

        Args:
            messages: Conversation, system prompt first
            max_tokens: Max tokens override

        Returns:
            The generated text
        """
        pass

    @abstractmethod
    def complete_streaming(
        self,
        messages: List[LLMMessage],
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """
        Stream a completion.

        Yields:
            str: Non-empty text deltas in upstream arrival order
        """
        pass

    def _format_messages(self, messages: List[LLMMessage]) -> List[Dict[str, Any]]:
        """Convert LLMMessage list to API-compatible format."""
        return [{"role": m.role, "content": m.content} for m in messages]

    def _max_tokens(self, max_tokens: Optional[int]) -> int:
        return max_tokens or self.default_max_tokens
