# specflow/api/health.py
"""
Health check endpoints.
"""
from datetime import datetime, timezone
from fastapi import APIRouter

from specflow.api.errors import ok
from specflow.db import get_connection_error, is_connected

router = APIRouter(tags=["Health"])


@router.get("/healthz")
async def healthz():
    """Simple liveness check."""
    return ok({"ok": True, "timestamp": datetime.now(timezone.utc).isoformat()})


@router.get("/api/health")
async def api_health():
    """API health check, including the database connection."""
    return ok({
        "status": "healthy",
        "database": "connected" if is_connected() else "disconnected",
        "database_error": get_connection_error(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
