"""
Chat Models - Request and response bodies of the chat HTTP surface.
"""

from datetime import datetime, timezone
from typing import List, Literal
from pydantic import BaseModel, Field, field_validator

MAX_MESSAGE_LENGTH = 1000


class MessageRequest(BaseModel):
    """User message that asks for a reply."""
    message: str

    @field_validator("message")
    @classmethod
    def check_length(cls, value: str) -> str:
        if not value:
            raise ValueError("Message cannot be empty")
        if len(value) > MAX_MESSAGE_LENGTH:
            raise ValueError("Message is too long")
        return value


class AddMessageRequest(BaseModel):
    """Turn appended to the session without generating a reply."""
    message: str
    role: Literal["user", "assistant", "system"] = "user"

    @field_validator("message")
    @classmethod
    def check_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Message is required")
        return value


class ChatMessage(BaseModel):
    """Client-facing view of one history entry."""
    id: str
    text: str
    sender: Literal["user", "assistant"]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HistoryResponse(BaseModel):
    messages: List[ChatMessage]


class MessageResponse(BaseModel):
    id: str
    answer: str
    timestamp: datetime


class SessionResponse(BaseModel):
    success: bool = True
    session_id: str = Field(serialization_alias="sessionId")


class Suggestion(BaseModel):
    id: int
    text: str
    icon: str


class ChatSettingsResponse(BaseModel):
    model: str
    provider: str
    max_tokens: int = Field(serialization_alias="maxTokens")
    site_name: str = Field(serialization_alias="siteName")
    project_name: str = Field(serialization_alias="projectName")
    project_type: str = Field(serialization_alias="projectType")
    suggestions: List[Suggestion]


class KnowledgeContent(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def check_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Content cannot be empty")
        return value


class DocumentAnalysisRequest(BaseModel):
    text: str = Field(min_length=1, max_length=50_000)


class DocumentAnalysisResponse(BaseModel):
    analysis: str
