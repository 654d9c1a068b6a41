"""Health check endpoints."""
from datetime import datetime, timezone
from typing import Dict, Any
from fastapi import APIRouter, Depends

from injurylog import __version__
from injurylog.config import settings
from injurylog.context import LogContext
from injurylog.deps import get_request_id, get_context
from injurylog.errors import NotFoundError, StorageError
from injurylog.app_logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get("/ping")
async def ping(request_id: str = Depends(get_request_id)) -> Dict[str, Any]:
    """Simple health check."""
    logger.debug(f"Health check requested - request_id: {request_id}")
    return {
        "status": "ok",
        "message": "Injury Log API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


@router.get("/health")
def health(
    request_id: str = Depends(get_request_id),
    ctx: LogContext = Depends(get_context),
) -> Dict[str, Any]:
    """Detailed health check."""
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "services": {
            "api": "healthy",
            "storage": "unknown",
        },
    }

    # A missing log still means the store answered
    try:
        ctx.adapter.get(ctx.log_path)
        health_status["services"]["storage"] = "healthy"
    except NotFoundError:
        health_status["services"]["storage"] = "healthy"
    except StorageError as e:
        health_status["services"]["storage"] = "unhealthy"
        health_status["status"] = "degraded"
        logger.error(f"Storage health check failed: {e}")

    status_value = health_status["status"]
    logger.info(f"Health check completed - {status_value} - request_id: {request_id}")
    return health_status
