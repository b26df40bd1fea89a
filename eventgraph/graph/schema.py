"""
Graph schema definitions.

Defines vertex types, edge types, and their payloads for the event graph.
Vertices are a tagged variant: a single Vertex class whose `type` tag
decides which payload fields are meaningful.
"""

from enum import Enum
from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field


class VertexType(str, Enum):
    """Types of vertices in the graph."""
    USER = "User"
    EVENT = "Event"
    CATEGORY = "Category"


class EdgeType(str, Enum):
    """Types of edges (relationships) in the graph."""
    # User -> Event (weighted by rating)
    ATTENDED = "ATTENDED"

    # Event -> Category
    IN_CATEGORY = "IN_CATEGORY"

    # Category -> Event
    HAS_EVENT = "HAS_EVENT"

    # User -> User
    FRIEND_OF = "FRIEND_OF"


def normalize_id(identifier: str) -> str:
    """
    Create the lookup key for a vertex id.

    Args:
        identifier: Raw id as typed by the caller

    Returns:
        Lowercased, whitespace-trimmed key (e.g., "  Comedy " -> "comedy")
    """
    return identifier.strip().lower()


# Demo data loaded into an empty graph
DEFAULT_CATEGORIES: List[str] = ["concert", "comedy", "charity", "theatre", "workshops"]

DEFAULT_USERS: List[str] = ["A", "B", "C"]

DEFAULT_EVENTS: Dict[str, List[str]] = {
    "ComedyClash": ["comedy", "theatre"],
    "KIDULTING! Comedy Special": ["comedy", "theatre"],
    "Mads Comedy Night": ["comedy", "theatre"],
    "FantasticDuoConcert": ["concert"],
    "Lovely Day Charity Concert": ["charity", "concert"],
    "VarietyCharityConcert": ["charity", "concert", "theatre"],
    "PythonWorkshop": ["workshops"],
    "AI Bootcamp": ["workshops"],
}

# (user, event, rating)
DEFAULT_ATTENDANCE: List[Tuple[str, str, float]] = [
    ("A", "ComedyClash", 4.0),
    ("B", "FantasticDuoConcert", 5.0),
    ("B", "VarietyCharityConcert", 3.0),
    ("C", "PythonWorkshop", 4.0),
    ("C", "AI Bootcamp", 5.0),
    ("C", "Mads Comedy Night", 2.0),
]


@dataclass(eq=False)
class Vertex:
    """
    Vertex representation.

    Equality is by raw id (case-sensitive), which is stricter than the
    normalized lookup the store uses.
    """
    id: str
    type: VertexType
    attended_events: List[str] = field(default_factory=list)  # User only, raw event ids
    categories: List[str] = field(default_factory=list)  # Event only, category names

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vertex):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def key(self) -> str:
        return normalize_id(self.id)

    @property
    def is_user(self) -> bool:
        return self.type == VertexType.USER

    @property
    def is_event(self) -> bool:
        return self.type == VertexType.EVENT

    @property
    def is_category(self) -> bool:
        return self.type == VertexType.CATEGORY

    def has_attended(self, event_id: str) -> bool:
        """Check attendance by normalized event id."""
        key = normalize_id(event_id)
        return any(normalize_id(e) == key for e in self.attended_events)

    def category_keys(self) -> set:
        """Normalized category names of an event."""
        return {normalize_id(c) for c in self.categories}

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
        }
        if self.type == VertexType.USER:
            data["attended_events"] = list(self.attended_events)
        elif self.type == VertexType.EVENT:
            data["categories"] = list(self.categories)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vertex":
        return cls(
            id=data["id"],
            type=VertexType(data["type"]),
            attended_events=list(data.get("attended_events", [])),
            categories=list(data.get("categories", []))
        )


@dataclass(frozen=True)
class Edge:
    """
    Directed edge representation.

    Two edges are equal when source and target match; weight and type
    are not compared.
    """
    source: str
    target: str
    weight: Optional[float] = field(default=None, compare=False)
    type: Optional[EdgeType] = field(default=None, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "type": self.type.value if self.type else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        edge_type = data.get("type")
        weight = data.get("weight")
        return cls(
            source=data["source"],
            target=data["target"],
            weight=float(weight) if weight is not None else None,
            type=EdgeType(edge_type) if edge_type else None
        )


# Vertex factory functions

def create_user_vertex(user_id: str) -> Vertex:
    """Create a User vertex."""
    return Vertex(id=user_id, type=VertexType.USER)


def create_event_vertex(event_id: str, categories: Optional[List[str]] = None) -> Vertex:
    """Create an Event vertex."""
    return Vertex(
        id=event_id,
        type=VertexType.EVENT,
        categories=list(categories or [])
    )


def create_category_vertex(category_id: str) -> Vertex:
    """Create a Category vertex."""
    return Vertex(id=category_id, type=VertexType.CATEGORY)
