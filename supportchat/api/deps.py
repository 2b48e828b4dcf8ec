"""
Request dependencies - resolve the process-wide collaborators held on app.state.
"""

from fastapi import Depends, Request

from ..config import settings
from ..core import PromptAssembler, StreamRelay
from ..knowledge import KnowledgeBase
from ..llm.base import LLMProvider, ProviderNotConfigured
from ..sessions import SessionStore


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_knowledge_base(request: Request) -> KnowledgeBase:
    return request.app.state.knowledge_base


def get_llm_provider(request: Request) -> LLMProvider:
    provider = getattr(request.app.state, "llm_provider", None)
    if provider is None:
        raise ProviderNotConfigured(
            f"No API key configured for provider '{settings.ai_provider}'"
        )
    return provider


def get_prompt_assembler(
    store: SessionStore = Depends(get_session_store),
    knowledge_base: KnowledgeBase = Depends(get_knowledge_base),
) -> PromptAssembler:
    return PromptAssembler(store, knowledge_base, settings.project_name, settings.project_type)


def get_stream_relay(
    store: SessionStore = Depends(get_session_store),
    assembler: PromptAssembler = Depends(get_prompt_assembler),
    provider: LLMProvider = Depends(get_llm_provider),
) -> StreamRelay:
    return StreamRelay(store, assembler, provider, max_tokens=settings.max_tokens)
