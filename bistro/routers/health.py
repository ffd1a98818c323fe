"""
Health check router with database connectivity verification.
"""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bistro.db.session import get_db

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check - always returns OK."""
    return {"status": "ok"}


@router.get("/health/db")
def database_health_check(db: Session = Depends(get_db)):
    """
    Verify database connectivity.

    Returns 200 when the database answers, 503 otherwise.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "services": {"database": {"status": "error", "message": str(e)}}},
        )

    return {"status": "ok", "services": {"database": {"status": "ok"}}}
