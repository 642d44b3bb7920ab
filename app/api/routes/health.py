'''
Health checks: a simple API status and a database connectivity probe.
'''
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db, check_db_connection
from app.services.model import describe

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE = "moodweek-api"

@router.get("/health")
async def health():
    """
    Simple health check endpoint. Does not require database connectivity.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "API is running",
        "service": SERVICE
    }

@router.get("/health/full")
async def health_full(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Verifies database connectivity and reports which summary model is loaded.
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "unknown",
        "summary_model": describe(getattr(request.app.state, "summary_model", None)),
        "service": SERVICE
    }

    if await check_db_connection(db):
        health_status["database"] = "connected"
    else:
        logger.error("Database health check failed")
        health_status["status"] = "unhealthy"
        health_status["database"] = "disconnected"

    return health_status
