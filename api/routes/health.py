"""Health check and root endpoints."""

import structlog
from fastapi import APIRouter, Request

# Initialize logger
logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint."""
    logger.info("root_endpoint_accessed")
    return {"message": "Welcome to Smart Notes API"}


@router.get("/health")
async def health(request: Request):
    """Health check endpoint, reporting whether AI calls run live or in demo mode."""
    logger.debug("health_check_requested")
    ai_mode = "live" if request.app.state.ai_gateway.live else "demo"
    return {"status": "healthy", "service": "smartnotes-api", "ai_mode": ai_mode}
