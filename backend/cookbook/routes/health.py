"""
Cookbook Services — Health Check
==================================

GET /health reports the service name, version and whether the database
answers ``SELECT 1``. Not behind authentication; 503 when the database is
unreachable.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from cookbook import __version__
from cookbook.database import get_db_session
from cookbook.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> JSONResponse:
    database = "connected"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        database = "disconnected"

    healthy = database == "connected"
    report = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        service=request.app.title,
        version=__version__,
        database=database,
    )
    return JSONResponse(status_code=200 if healthy else 503, content=report.model_dump())
