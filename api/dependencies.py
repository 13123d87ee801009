"""FastAPI dependencies exposing the per-process services."""

from fastapi import Request

from .services.ai_gateway import AIGateway
from .services.note_service import NoteService


def get_ai_gateway(request: Request) -> AIGateway:
    """AI gateway built once in the application lifespan."""
    return request.app.state.ai_gateway


def get_note_service(request: Request) -> NoteService:
    """Note service built once in the application lifespan."""
    return request.app.state.note_service
