"""
Liveness and readiness endpoints for the reservation core.

Readiness means reservations can be both stored and paid for: the database
answers and payment gateway credentials are configured. The gateway itself is
not called, so a slow gateway never fails the readiness check.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from rental_reservations import config
from rental_reservations.db.engine import check_engine_health

logger = structlog.get_logger(__name__)

router = APIRouter()


def gateway_configured() -> bool:
    return bool(config.PAYMENT_APPLICATION_ID and config.PAYMENT_PRIVATE_KEY)


@router.get("/health")
def health_check() -> JSONResponse:
    return JSONResponse(content={"status": "ok"})


@router.get("/ready")
def readiness_check() -> JSONResponse:
    """
    Readiness check endpoint.

    Example:
        >>> GET /ready
        {"status": "ready", "checks": {"database": "ok", "payment_gateway": "configured"}}
    """
    checks = {
        "database": "ok" if check_engine_health() else "failed",
        "payment_gateway": "configured" if gateway_configured() else "missing_credentials",
    }
    failed = [
        name
        for name, result in checks.items()
        if result not in ("ok", "configured")
    ]

    if failed:
        logger.error("readiness_check_failed", failed_checks=failed)
        return JSONResponse(status_code=503, content={"status": "not ready", "checks": checks})

    return JSONResponse(content={"status": "ready", "checks": checks})
