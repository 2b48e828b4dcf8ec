"""
Knowledge base API endpoints - read, replace and extend the knowledge base.
"""

import logging

from fastapi import APIRouter, Depends, status

from ..knowledge import KnowledgeBase
from ..models import KnowledgeContent
from .deps import get_knowledge_base
from .errors import message_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.get("")
async def get_knowledge(knowledge_base: KnowledgeBase = Depends(get_knowledge_base)):
    """Current knowledge-base content."""
    return {"content": await knowledge_base.get_text()}


@router.post("/update")
async def update_knowledge(
    body: KnowledgeContent,
    knowledge_base: KnowledgeBase = Depends(get_knowledge_base),
):
    """Replace the knowledge base with new content."""
    if not await knowledge_base.set_text(body.content):
        return message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update knowledge base")
    return {"message": "Knowledge base updated successfully"}


@router.post("/append")
async def append_knowledge(
    body: KnowledgeContent,
    knowledge_base: KnowledgeBase = Depends(get_knowledge_base),
):
    """Add content to the end of the knowledge base."""
    if not await knowledge_base.append_text(body.content):
        return message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to append to knowledge base")
    return {"message": "Content appended to knowledge base successfully"}
