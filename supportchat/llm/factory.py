"""
LLM Provider Factory - Creates the configured LLM provider instance.
"""

from typing import Optional
from .base import LLMProvider
from .openai_provider import OpenAIProvider
from .openrouter_provider import OpenRouterProvider
from .sambanova_provider import SambaNovaProvider

PROVIDERS = {
    "openai": OpenAIProvider,
    "openrouter": OpenRouterProvider,
    "sambanova": SambaNovaProvider,
}


def create_llm_provider(
    provider: str = "openai",
    api_key: str = "",
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    **kwargs
) -> Optional[LLMProvider]:
    """
    Create an LLM provider instance based on configuration.

    Args:
        provider: Provider name ("openai", "openrouter" or "sambanova")
        api_key: API key for the provider
        model: Model name (uses provider default if not specified)
        base_url: Custom base URL (uses provider default if not specified)
        **kwargs: Additional provider-specific parameters

    Returns:
        LLMProvider instance, or None if api_key is not configured
    """
    provider_cls = PROVIDERS.get(provider)
    if provider_cls is None:
        raise ValueError(f"Unsupported LLM provider: {provider}")

    if not api_key:
        return None

    params = {"api_key": api_key}
    if model:
        params["model"] = model
    if base_url:
        params["base_url"] = base_url
    params.update(kwargs)
    return provider_cls(**params)


def create_llm_provider_from_settings(settings) -> Optional[LLMProvider]:
    """Build the provider selected by ``settings.ai_provider``."""
    extra = {"default_max_tokens": settings.max_tokens}
    base_url = None

    if settings.ai_provider == "openrouter":
        base_url = settings.openrouter_base_url
        extra["site_url"] = settings.site_url
        extra["site_name"] = settings.resolved_site_name
    elif settings.ai_provider == "sambanova":
        base_url = settings.sambanova_base_url
        extra["chunk_delay"] = settings.simulated_chunk_delay_ms / 1000
        extra["words_per_chunk"] = settings.simulated_words_per_chunk

    return create_llm_provider(
        provider=settings.ai_provider,
        api_key=settings.api_key_for(settings.ai_provider) or "",
        model=settings.ai_model,
        base_url=base_url,
        **extra,
    )
