"""
Recommendations endpoints.
"""

from typing import Optional, List

from fastapi import APIRouter, Query
from pydantic import BaseModel

from ..deps import ServicesDep
from .events import EventResponse

router = APIRouter()


class RecommendationsResponse(BaseModel):
    """Recommendations response."""
    user_id: str
    policy: str  # "categories" (no attendance yet) or "traversal"
    max_depth: int
    events: List[EventResponse]
    total: int


@router.get("/{user_id}/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    user_id: str,
    services: ServicesDep,
    max_depth: Optional[int] = Query(None, description="Traversal hop limit (default from config)"),
    category: Optional[List[str]] = Query(None, description="Preferred categories for users with no attendance")
):
    """
    Recommend events for a user.

    Users with attendance history get a breadth-first traversal over their
    categories and friends. Users without history get every event in the
    categories passed as `category` query parameters.
    """
    with services.lock:
        user = services.users.get_user(user_id)
        cold_start = services.recommendations.needs_categories(user.id)
        depth = services.config.recommendation.max_depth if max_depth is None else max_depth
        events = services.recommendations.recommend(user.id, depth, category)

    return RecommendationsResponse(
        user_id=user.id,
        policy="categories" if cold_start else "traversal",
        max_depth=depth,
        events=[EventResponse.from_vertex(e) for e in events],
        total=len(events)
    )
