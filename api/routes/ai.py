"""AI enrichment endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException

from ..auth import get_current_user_id
from ..dependencies import get_ai_gateway, get_note_service
from ..models import (
    AnalyzeRequest,
    AnalyzeResponse,
    ContentRequest,
    ImproveResponse,
    RelatedNotesResponse,
    SuggestionsResponse,
)
from ..observability import get_tracer
from ..services.ai_gateway import AIGateway
from ..services.errors import NoteStoreError
from ..services.note_service import NoteService

# Initialize logger
logger = structlog.get_logger(__name__)

# Get tracer
tracer = get_tracer(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])


def _require_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise HTTPException(status_code=400, detail="Content is required")
    return content


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    body: AnalyzeRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    """Analyze content for topics, tags, suggestions and style improvements."""
    content = _require_content(body.content)

    with tracer.start_as_current_span("ai_analyze") as span:
        span.set_attribute("user.id", user_id)
        analysis = await gateway.analyze(content, body.title or "")
        logger.info("ai_analysis_served", user_id=user_id, tags=len(analysis.tags))
        return AnalyzeResponse(analysis=analysis)


@router.post("/improve", response_model=ImproveResponse)
async def improve(
    body: ContentRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    """Rewrite content for grammar and style."""
    content = _require_content(body.content)

    with tracer.start_as_current_span("ai_improve") as span:
        span.set_attribute("user.id", user_id)
        improved = await gateway.improve(content)
        return ImproveResponse(improved_content=improved)


@router.post("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    body: ContentRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    """Suggest ways to complete or expand content."""
    content = _require_content(body.content)

    with tracer.start_as_current_span("ai_suggestions") as span:
        span.set_attribute("user.id", user_id)
        return SuggestionsResponse(suggestions=await gateway.suggest(content))


@router.post("/related", response_model=RelatedNotesResponse)
async def related(
    body: ContentRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    """
    Find notes of the requesting user related to the given content.

    Without a configured AI provider the similarity scores are placeholders.
    """
    content = _require_content(body.content)

    with tracer.start_as_current_span("ai_related") as span:
        span.set_attribute("user.id", user_id)

        try:
            related_notes = await service.find_related(content, user_id)
        except NoteStoreError as e:
            logger.error("ai_related_failed", user_id=user_id, error=str(e))
            raise HTTPException(status_code=500, detail="Failed to find related notes")

        span.set_attribute("related.count", len(related_notes))
        return RelatedNotesResponse(related_notes=related_notes)
