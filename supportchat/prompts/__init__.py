"""Prompt templates."""

from .system_prompt import (
    KNOWLEDGE_BASE_MARKER,
    generate_system_prompt,
    generate_document_analysis_prompt,
    strip_knowledge_base,
)

__all__ = [
    'KNOWLEDGE_BASE_MARKER',
    'generate_system_prompt',
    'generate_document_analysis_prompt',
    'strip_knowledge_base',
]
