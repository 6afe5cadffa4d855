"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the audit-trail database is unreachable
    - Outbox backlog is reported, never gated on

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

import app.infrastructure.database as db_module
from app.api.dependencies import get_marketplace
from app.services.marketplace_service import MarketplaceService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "escrow-marketplace-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    service: MarketplaceService = Depends(get_marketplace),
):
    """Readiness probe — database connectivity plus outbox backlog."""
    manager = db_module.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        logger.warning(
            f"Not ready: database unavailable, {len(service.outbox)} event(s) unpersisted",
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "unpersisted_events": len(service.outbox),
        },
    }
