"""Health check endpoint."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.orm import Session

from src.db.database import get_db

router = APIRouter()


@router.get("/health")
def health_check(request: Request, db: Session = Depends(get_db)) -> dict[str, str]:
    """Return application, database and AI provider status."""
    provider = getattr(request.app.state, "ai_provider", None)
    ai_status = provider.name if provider is not None else "unconfigured"
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected", "ai_provider": ai_status}
    except Exception:
        return {"status": "error", "database": "disconnected", "ai_provider": ai_status}
