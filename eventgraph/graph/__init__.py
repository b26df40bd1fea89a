"""
Graph module for the event recommender.

Provides the in-memory event graph built on NetworkX:
- User, Event and Category vertices
- Rating, category and friendship edges
- Breadth-first event recommendations
- JSON snapshot persistence
"""

from .schema import Vertex, Edge, VertexType, EdgeType, normalize_id
from .store import GraphStore
from .queries import RecommendationEngine
from .persistence import JsonGraphPersistence, snapshot, restore

__all__ = [
    "Vertex",
    "Edge",
    "VertexType",
    "EdgeType",
    "normalize_id",
    "GraphStore",
    "RecommendationEngine",
    "JsonGraphPersistence",
    "snapshot",
    "restore",
]
