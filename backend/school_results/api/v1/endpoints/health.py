"""Health and readiness endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from school_results.core.errors import get_request_id
from school_results.core.logging import get_logger
from school_results.db.session import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok"] = "ok"


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    status: Literal["ok", "down"]
    database: Literal["ok", "down"]
    request_id: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    """Health check endpoint - just checks if the process is alive."""
    return HealthResponse(status="ok")


@router.get("/ready", response_model=ReadinessResponse, summary="Readiness check")
def readiness_check(request: Request, db: Session = Depends(get_db)) -> ReadinessResponse:
    """Verify database connectivity."""
    database: Literal["ok", "down"] = "ok"
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database readiness check failed", extra={"error": str(e)})
        database = "down"
    return ReadinessResponse(status=database, database=database, request_id=get_request_id(request))
