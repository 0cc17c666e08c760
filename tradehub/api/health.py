"""Health check endpoints"""

import logging
from datetime import datetime

from fastapi import APIRouter, Request, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

API_VERSION = "1.0.0"


@router.get("/health", status_code=status.HTTP_200_OK)
async def basic_health_check():
    """
    Basic health check endpoint (no authentication required)

    Returns simple health status and timestamp
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/api/v1/health", status_code=status.HTTP_200_OK)
async def detailed_health_check(request: Request):
    """
    Detailed health check with database connectivity (no authentication required)

    Returns overall status and individual service statuses
    """
    services = {}
    overall_status = "healthy"

    # Check database connectivity
    try:
        async with request.app.state.session_factory() as db:
            result = await db.execute(text("SELECT 1"))
            result.scalar_one()
        services["database"] = "connected"
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        services["database"] = "disconnected"
        overall_status = "degraded"

    return {
        "status": overall_status,
        "version": API_VERSION,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "services": services
    }
