"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from assetledger.api.deps import Services, get_services
from assetledger.persistence.redis_backend import RedisCacheBackend

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
def ready(services: Services = Depends(get_services)):
    cache = services.persistence.cache
    if isinstance(cache, RedisCacheBackend) and not cache.ping():
        return JSONResponse(status_code=503, content={"status": "unavailable", "cache": "down"})
    return {"status": "ready", "storage_backend": services.settings.storage_backend}
