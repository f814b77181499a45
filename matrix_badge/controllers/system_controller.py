# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from matrix_badge.core.config import settings
from matrix_badge.core.dependencies import get_cache, is_initialised

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness check for Docker and orchestration."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cached_rooms": get_cache().count(),
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness check — the outbound HTTP client must be up."""
    if not is_initialised():
        raise HTTPException(status_code=503, detail="HTTP client not initialised")
    return {"status": "ready", "service": settings.SERVICE_NAME}


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
