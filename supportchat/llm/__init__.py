"""LLM module - provides unified interface for chat-completion providers."""

from .base import LLMProvider, LLMMessage, UpstreamError, ProviderNotConfigured
from .openai_provider import OpenAIProvider
from .openrouter_provider import OpenRouterProvider
from .sambanova_provider import SambaNovaProvider
from .factory import create_llm_provider, create_llm_provider_from_settings

__all__ = [
    'LLMProvider',
    'LLMMessage',
    'UpstreamError',
    'ProviderNotConfigured',
    'OpenAIProvider',
    'OpenRouterProvider',
    'SambaNovaProvider',
    'create_llm_provider',
    'create_llm_provider_from_settings',
]
