"""Models module."""

from .chat import (
    MessageRequest, AddMessageRequest, ChatMessage, HistoryResponse, MessageResponse,
    SessionResponse, Suggestion, ChatSettingsResponse, KnowledgeContent,
    DocumentAnalysisRequest, DocumentAnalysisResponse, MAX_MESSAGE_LENGTH,
)
from .stream import StartEvent, ChunkEvent, EndEvent, ErrorEvent, StreamEvent, format_sse

__all__ = [
    'MessageRequest', 'AddMessageRequest', 'ChatMessage', 'HistoryResponse', 'MessageResponse',
    'SessionResponse', 'Suggestion', 'ChatSettingsResponse', 'KnowledgeContent',
    'DocumentAnalysisRequest', 'DocumentAnalysisResponse', 'MAX_MESSAGE_LENGTH',
    'StartEvent', 'ChunkEvent', 'EndEvent', 'ErrorEvent', 'StreamEvent', 'format_sse',
]
