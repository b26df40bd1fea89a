"""
Events endpoints.

Handles event creation, listing, and removal.
"""

from typing import List

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from eventgraph.graph import Vertex

from ..deps import ServicesDep

router = APIRouter()


# Request/Response models

class CreateEventRequest(BaseModel):
    """Create event request."""
    event_id: str = Field(..., min_length=1, description="Event name")
    categories: List[str] = Field(..., description="Category names; missing ones are created")


class EventResponse(BaseModel):
    """Event response."""
    event_id: str
    categories: List[str]

    @classmethod
    def from_vertex(cls, vertex: Vertex) -> "EventResponse":
        return cls(event_id=vertex.id, categories=list(vertex.categories))


class EventsListResponse(BaseModel):
    """List of events response."""
    events: List[EventResponse]
    total: int


# Endpoints

@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(request: CreateEventRequest, services: ServicesDep):
    """
    Create an event.

    Categories that do not exist yet are created and linked both ways.
    """
    with services.lock:
        event = services.catalog.add_event(request.event_id, request.categories)
    return EventResponse.from_vertex(event)


@router.get("", response_model=EventsListResponse)
async def list_events(services: ServicesDep):
    """List all events."""
    with services.lock:
        events = [EventResponse.from_vertex(e) for e in services.catalog.list_events()]
    return EventsListResponse(events=events, total=len(events))


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, services: ServicesDep):
    """Get a single event."""
    with services.lock:
        event = services.catalog.get_event(event_id)
    return EventResponse.from_vertex(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, services: ServicesDep):
    """
    Remove an event.

    Also removes its category links and every attendance record of it.
    """
    with services.lock:
        services.catalog.remove_event(event_id)
