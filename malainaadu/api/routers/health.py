"""
Health endpoints.
"""

from fastapi import APIRouter, Depends

from ... import __version__
from ...health import HealthMonitor
from ..deps import get_health_monitor

router = APIRouter()


@router.get("/health")
def liveness_check():
    """Liveness probe; touches no collaborators."""
    return {"status": "ok", "version": __version__}


@router.post("/check-fetch-health")
def check_fetch_health(monitor: HealthMonitor = Depends(get_health_monitor)):
    """Inspect the latest fetch run and alert subscribers outside their cooldown."""
    return monitor.check().to_response()
