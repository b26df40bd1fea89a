"""
System endpoints.

Health checks and system status.
"""

from fastapi import APIRouter

from ..deps import ServicesDep

router = APIRouter()


@router.get("/status")
async def get_status(services: ServicesDep):
    """
    Status endpoint.

    Reports whether the last snapshot write succeeded.
    """
    error = services.context.last_persistence_error
    return {
        "status": "healthy" if not error else "degraded",
        "service": "event-graph-api",
        "persistence_error": error
    }
