from typing import Any, Dict

from fastapi import APIRouter

from codechecker.core.config import get_settings

router = APIRouter()


@router.get("")
async def health_check() -> Dict[str, Any]:
    """Basic health status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.version,
        "environment": settings.environment.value,
    }


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """Liveness probe for container orchestrators."""
    return {"status": "alive"}
