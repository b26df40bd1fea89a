"""
Recommendation service.

Thin layer over RecommendationEngine that resolves ids and applies
configured defaults. Never mutates the graph.
"""

import logging
from typing import Iterable, List, Optional

from .base import BaseService, ServiceContext
from ..graph import RecommendationEngine, Vertex, VertexType

logger = logging.getLogger(__name__)


class RecommendationService(BaseService):
    """Service for event recommendations."""

    def __init__(self, context: ServiceContext):
        super().__init__(context)
        self.engine = RecommendationEngine(
            self.store,
            min_rating=self.config.recommendation.min_rating
        )

    def needs_categories(self, user_id: str) -> bool:
        """
        Whether a user is a cold start (no attendance yet).

        Callers use this to ask the user for categories before recommend().
        """
        user = self.require_vertex(user_id, VertexType.USER)
        return not user.attended_events

    def recommend(
        self,
        user_id: str,
        max_depth: Optional[int] = None,
        categories: Optional[Iterable[str]] = None
    ) -> List[Vertex]:
        """
        Recommend events for a user.

        Args:
            user_id: User id
            max_depth: Hop limit (defaults to the configured depth)
            categories: Chosen categories for a user with no attendance

        Returns:
            Events in discovery order

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.require_vertex(user_id, VertexType.USER)
        depth = self.config.recommendation.max_depth if max_depth is None else max_depth

        recommendations = self.engine.recommend(user, depth, categories)
        logger.info(f"Recommended {len(recommendations)} events for {user.id}")
        return recommendations
