"""
Services layer for the event graph.

This module provides the core business logic as reusable services
that can be consumed by the CLI, the API, or any other interface.
"""

from .base import BaseService, ServiceContext
from .user_service import UserService, validate_rating
from .catalog_service import CatalogService
from .recommendation_service import RecommendationService
from .graph_service import GraphService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Services
    "UserService",
    "CatalogService",
    "RecommendationService",
    "GraphService",
    # Helpers
    "validate_rating",
]


def create_services(context: ServiceContext = None):
    """
    Factory function to create all services with proper dependencies.

    Seeds the demo data when the graph is empty and seeding is enabled.

    Args:
        context: Optional ServiceContext (creates one if not provided)

    Returns:
        Tuple of (context, users, catalog, recommendations, graph)
    """
    if context is None:
        context = ServiceContext.create()

    user_service = UserService(context)
    catalog_service = CatalogService(context)
    recommendation_service = RecommendationService(context)
    graph_service = GraphService(context, user_service, catalog_service)

    if context.config.storage.seed_defaults and graph_service.is_empty():
        graph_service.seed_defaults()

    return (
        context,
        user_service,
        catalog_service,
        recommendation_service,
        graph_service
    )
