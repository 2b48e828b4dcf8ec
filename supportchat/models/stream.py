"""
Stream Event Models - the server-to-client SSE protocol.

A completed stream is always ``start chunk* (end | error)``.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StartEvent(BaseModel):
    type: Literal["start"] = "start"
    id: str


class ChunkEvent(BaseModel):
    type: Literal["chunk"] = "chunk"
    id: str
    content: str
    timestamp: datetime = Field(default_factory=_now)


class EndEvent(BaseModel):
    type: Literal["end"] = "end"
    id: str
    full_content: str = Field(serialization_alias="fullContent", validation_alias="fullContent")
    timestamp: datetime = Field(default_factory=_now)

    model_config = {"populate_by_name": True}


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    error: str


StreamEvent = Annotated[
    Union[StartEvent, ChunkEvent, EndEvent, ErrorEvent],
    Field(discriminator="type"),
]


def format_sse(event: BaseModel) -> str:
    """Encode one event as an SSE ``data:`` frame."""
    return f"data: {event.model_dump_json(by_alias=True)}\n\n"
