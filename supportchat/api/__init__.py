"""API module."""

from .chat import router as chat_router
from .knowledge import router as knowledge_router
from .documents import router as documents_router
from .errors import register_exception_handlers

__all__ = ['chat_router', 'knowledge_router', 'documents_router', 'register_exception_handlers']
