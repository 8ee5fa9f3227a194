"""Health check endpoint."""

import logging
import time
from datetime import datetime, timezone
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import config
from adapter.mongodb.connection import get_mongodb_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _user_store_status() -> dict:
    if config.USER_STORE != "mongodb":
        return {
            "status": "healthy",
            "backend": "memory",
            "message": "In-process store (not persisted)",
        }

    try:
        mongo_client = get_mongodb_client()
        if mongo_client:
            mongo_client.admin.command('ping')
            return {"status": "healthy", "backend": "mongodb", "message": "Connection successful"}
        return {
            "status": "unhealthy",
            "backend": "mongodb",
            "message": "Connection failed or not configured",
        }
    except Exception as e:
        logger.warning("MongoDB health check failed", extra={"error": str(e)[:200]})
        return {
            "status": "unhealthy",
            "backend": "mongodb",
            "message": f"Connection error: {str(e)[:200]}",
        }


@router.get("")
def health():
    """Health check endpoint with user store status."""
    users = _user_store_status()
    overall_healthy = users["status"] == "healthy"

    health_status = {
        "status": "healthy" if overall_healthy else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "uptime": round(time.monotonic() - _started_at, 3),
        "services": {"users": users},
    }

    status_code = status.HTTP_200_OK if overall_healthy else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        content=health_status,
        status_code=status_code
    )
