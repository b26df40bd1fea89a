"""
Graph endpoints.

Read-only views of the whole graph plus demo data seeding.
"""

from typing import Dict, List, Any

from fastapi import APIRouter
from pydantic import BaseModel

from ..deps import ServicesDep

router = APIRouter()


class AdjacencyResponse(BaseModel):
    """Adjacency list response."""
    adjacency: Dict[str, List[str]]


@router.get("/adjacency", response_model=AdjacencyResponse)
async def get_adjacency(services: ServicesDep):
    """Every vertex with the ids it points to."""
    with services.lock:
        return AdjacencyResponse(adjacency=services.graph.adjacency_view())


@router.get("/stats")
async def get_stats(services: ServicesDep) -> Dict[str, Any]:
    """Vertex and edge counts by type."""
    with services.lock:
        return services.graph.stats()


@router.post("/seed")
async def seed_graph(services: ServicesDep) -> Dict[str, Any]:
    """
    Load the demo data.

    Only allowed on an empty graph.
    """
    with services.lock:
        services.graph.seed_defaults()
        return services.graph.stats()
