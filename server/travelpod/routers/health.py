"""Health check router."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from .. import __version__
from ..core.config import settings
from ..core.database import get_db
from ..schemas.health import HealthResponse, HealthStatus
from ..workers.manager import worker_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/health", tags=["health"])

DB_DEPENDENCY = Depends(get_db)


@router.post("/ping", response_model=HealthResponse)
async def health_ping(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """
    Health check endpoint.

    Runs a trivial query through the request's session and reports the
    background workers. Answers 200 even when degraded so callers can read
    the checks.
    """
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.warning("Database ping failed", extra={"error": str(e)})
        database = "unavailable"

    response_data = HealthResponse(
        status=HealthStatus.HEALTHY if database == "ok" else HealthStatus.DEGRADED,
        timestamp=datetime.utcnow(),
        version=__version__,
        currency=settings.currency,
        checks={"database": database},
        workers=worker_manager.get_worker_status(),
    )

    logger.debug("Health check requested", extra={"status": response_data.status.value})

    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))
