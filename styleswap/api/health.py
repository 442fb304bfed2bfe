"""Health check endpoint."""

from fastapi import APIRouter, Request
from datetime import datetime, timezone

from .. import __version__

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@router.get("/")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": _timestamp(),
        "service": "styleswap",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check(request: Request):
    """Ready once the Gemini client has been initialized."""
    client = getattr(request.app.state, "gemini", None)
    return {
        "ready": client is not None and client.client is not None,
        "timestamp": _timestamp(),
    }
