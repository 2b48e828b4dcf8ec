"""
Document API endpoints - one-off document analysis outside any chat session.
"""

from fastapi import APIRouter, Depends

from ..core import StreamRelay
from ..models import DocumentAnalysisRequest, DocumentAnalysisResponse
from .deps import get_stream_relay

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.post("/analyze", response_model=DocumentAnalysisResponse)
async def analyze_document(
    body: DocumentAnalysisRequest,
    relay: StreamRelay = Depends(get_stream_relay),
):
    """Summarize a document from the point of view of the platform."""
    analysis = await relay.analyze_document(body.text)
    return DocumentAnalysisResponse(analysis=analysis)
