"""
API v1 router.

Aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from . import users, events, categories, recommendations, graph, system

router = APIRouter()

# Include all route modules
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(recommendations.router, prefix="/users", tags=["Recommendations"])
router.include_router(events.router, prefix="/events", tags=["Events"])
router.include_router(categories.router, prefix="/categories", tags=["Categories"])
router.include_router(graph.router, prefix="/graph", tags=["Graph"])
router.include_router(system.router, prefix="/system", tags=["System"])
