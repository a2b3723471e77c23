import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/test")
async def liveness():
    return {
        "message": "Electric Vehicle DataGrid API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health")
async def health_check(request: Request):
    """Check DB connectivity."""
    try:
        await request.app.state.database.ping()
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        logger.warning(f"Health check failed: {e}")
        return {"status": "error", "database": str(e)}
