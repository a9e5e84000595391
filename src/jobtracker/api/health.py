"""Health check endpoint.

Verifies the server is running and reports whether Postgres and Redis
are reachable. Always 200; "degraded" when a dependency is down.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from jobtracker import __version__
from jobtracker.db.engine import get_db
from jobtracker.redis_client import get_redis

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and dependency connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        logger.warning("jobtracker.health_database_error", error=str(e))
        checks["database"] = "error"

    # Redis only backs rate limiting, so "unavailable" is not a failure
    try:
        await get_redis().ping()
        checks["redis"] = "ok"
    except Exception:
        checks["redis"] = "unavailable"

    status = "healthy" if checks["database"] == "ok" else "degraded"

    return {"status": status, **checks}
