"""Health & Readiness Checks: liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - GET /health/ready also returns 503 with missing_tables while any model table
      is absent from the connected schema
    - A ready response reports the number of template types served
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from hrms.db.base import Base
from hrms.infrastructure import database
from hrms.services.template_registry import REGISTRY

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "hrms-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check: database connectivity, then schema completeness."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )

    missing = await manager.missing_tables(Base.metadata.tables)
    if missing:
        logger.warning(f"Schema incomplete, missing tables: {', '.join(missing)}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "schema_incomplete",
                "missing_tables": missing,
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy", "schema": "healthy"},
        "template_types": len(REGISTRY),
    }
