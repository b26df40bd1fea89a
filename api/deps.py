"""
API dependencies.

Provides dependency injection for services.
"""

import logging
import threading
from typing import Optional, Annotated
from dataclasses import dataclass, field

from fastapi import Depends

from eventgraph.config import load_config, Config
from eventgraph.services import (
    ServiceContext,
    UserService,
    CatalogService,
    RecommendationService,
    GraphService,
    create_services,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """
    Container for all services.

    The graph core is single-threaded; `lock` serializes every request
    that touches it.
    """
    config: Config
    context: ServiceContext
    users: UserService
    catalog: CatalogService
    recommendations: RecommendationService
    graph: GraphService
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)


# Global services instance (singleton)
_services: Optional[Services] = None


def build_services(context: ServiceContext) -> Services:
    """Wire all services around an existing context."""
    context, users, catalog, recommendations, graph = create_services(context)
    return Services(
        config=context.config,
        context=context,
        users=users,
        catalog=catalog,
        recommendations=recommendations,
        graph=graph
    )


def get_services() -> Services:
    """
    Get or create the services singleton.

    This restores the graph snapshot on first call.
    """
    global _services

    if _services is None:
        logger.info("Initializing services...")

        config = load_config()
        context = ServiceContext.create(config=config)
        _services = build_services(context)

        logger.info("Services initialized successfully")

    return _services


def close_services():
    """Flush the graph and drop the singleton."""
    global _services
    if _services:
        _services.context.persist()
        _services = None
        logger.info("Services closed")


# Dependency for getting services
def services_dep() -> Services:
    """FastAPI dependency for services."""
    return get_services()


ServicesDep = Annotated[Services, Depends(services_dep)]
