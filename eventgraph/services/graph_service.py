"""
Graph service.

Introspection and maintenance of the whole graph: adjacency view,
statistics, demo data and reset.
"""

import logging
from typing import Dict, Any, List

from .base import BaseService, ServiceContext
from .catalog_service import CatalogService
from .user_service import UserService
from ..errors import InvalidOperationError
from ..graph.schema import (
    DEFAULT_CATEGORIES, DEFAULT_USERS, DEFAULT_EVENTS, DEFAULT_ATTENDANCE
)

logger = logging.getLogger(__name__)


class GraphService(BaseService):
    """
    Service for whole-graph operations.

    Provides:
    - Read-only adjacency view for display tooling
    - Statistics
    - Demo data seeding and reset
    """

    def __init__(
        self,
        context: ServiceContext,
        user_service: UserService,
        catalog_service: CatalogService
    ):
        super().__init__(context)
        self.users = user_service
        self.catalog = catalog_service

    def adjacency_view(self) -> Dict[str, List[str]]:
        """
        Map each vertex's display id to the display ids of its successors.

        Returns:
            Dictionary in graph order; neighbors in edge order
        """
        view = {}
        for vertex in self.store.vertices():
            view[vertex.id] = [
                self.store.neighbor(edge).id
                for edge in self.store.outgoing_edges(vertex)
            ]
        return view

    def stats(self) -> Dict[str, Any]:
        """Get graph statistics."""
        return self.store.stats()

    def is_empty(self) -> bool:
        return len(self.store) == 0

    def seed_defaults(self):
        """
        Load the demo categories, users, events and attendance.

        Raises:
            InvalidOperationError: If the graph already has vertices
        """
        if not self.is_empty():
            raise InvalidOperationError("Graph is not empty; reset it before seeding")

        logger.info("Seeding default data")

        for category in DEFAULT_CATEGORIES:
            self.catalog.add_category(category)

        for user in DEFAULT_USERS:
            self.users.add_user(user)

        for event, categories in DEFAULT_EVENTS.items():
            self.catalog.add_event(event, categories)

        for user, event, rating in DEFAULT_ATTENDANCE:
            self.users.record_attendance(user, event, rating)

    def reset(self):
        """Remove every vertex and edge and persist the empty graph."""
        self.store.clear()
        self.context.persist()
        logger.info("Graph reset")
