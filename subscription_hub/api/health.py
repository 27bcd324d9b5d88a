"""
Health and readiness endpoints.

Provides lightweight checks for operational monitoring without exposing secrets.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from subscription_hub.core.logging import LOGGER_NAME, latency_bucket_ms
from subscription_hub.features.registry.hub import SubscriptionHub, get_hub
from subscription_hub.features.registry.state import REGISTRY_INFO

logger = logging.getLogger(LOGGER_NAME)

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    logger.info("health.liveness")
    return {"status": "ok"}


@router.get("/readyz")
def readyz(hub: SubscriptionHub = Depends(get_hub)):
    """Readiness check: store reachable and registry initialized."""
    start = time.perf_counter()
    try:
        with hub.store.transaction() as txn:
            info = REGISTRY_INFO.may_load(txn)
    except Exception as e:
        logger.error("health.readiness.failed", extra={"error_code": "storage_failure", "error_message": str(e)})
        return JSONResponse(status_code=503, content={"status": "unavailable"})

    latency_ms = (time.perf_counter() - start) * 1000
    return {
        "status": "ok" if info else "uninitialized",
        "store": type(hub.store).__name__,
        "registry": info,
        "latency_bucket": latency_bucket_ms(latency_ms),
        "computed_at": datetime.now(timezone.utc).isoformat(),
    }
