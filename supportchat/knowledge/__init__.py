"""Knowledge base module."""

from .store import KnowledgeBase

__all__ = ['KnowledgeBase']
