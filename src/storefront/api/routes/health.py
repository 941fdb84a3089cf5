"""
Health check endpoints.

/health is a plain liveness probe. /health/ready also checks the database
(required) and the product cache (optional; a failing cache only degrades).
"""

import time
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront import __version__
from storefront.api.schemas import error_payload, ok
from storefront.cache import NullCache, get_cache
from storefront.cache.redis_cache import Cache
from storefront.database.connection import get_db
from storefront.utils.logger import get_logger

logger = get_logger(__name__)


def health_check() -> Dict[str, Any]:
    """Returns 200 while the process is running."""
    return ok({
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": "storefront",
        "version": __version__,
    })


def readiness_check(db: Session = Depends(get_db), cache: Cache = Depends(get_cache)):
    checks = {
        "database": _check_database(db),
        "cache": _check_cache(cache),
    }

    if checks["database"]["status"] != "healthy":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=error_payload("SERVICE_UNAVAILABLE", "Database is unavailable", {"checks": checks}),
        )

    return ok({
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": checks,
    })


def _check_database(db: Session) -> Dict[str, Any]:
    start_time = time.time()

    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "response_time_ms": round((time.time() - start_time) * 1000, 2),
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "response_time_ms": round((time.time() - start_time) * 1000, 2),
        }


def _check_cache(cache: Cache) -> Dict[str, Any]:
    if isinstance(cache, NullCache):
        return {"status": "disabled"}

    start_time = time.time()
    healthy = cache.ping()
    return {
        "status": "healthy" if healthy else "unhealthy",
        "response_time_ms": round((time.time() - start_time) * 1000, 2),
    }


router = APIRouter()

router.add_api_route("", health_check, methods=["GET"], status_code=status.HTTP_200_OK)
router.add_api_route("/ready", readiness_check, methods=["GET"])
