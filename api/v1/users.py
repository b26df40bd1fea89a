"""
Users endpoints.

Handles users, attendance records and friendships.
"""

from typing import Optional, List

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from eventgraph.graph import Edge, Vertex

from ..deps import ServicesDep

router = APIRouter()


# Request/Response models

class CreateUserRequest(BaseModel):
    """Create user request."""
    user_id: str = Field(..., min_length=1, description="User name")


class UserResponse(BaseModel):
    """User response."""
    user_id: str
    attended_events: List[str] = []
    friends: List[str] = []


class UsersListResponse(BaseModel):
    """List of users response."""
    users: List[UserResponse]
    total: int


class AttendanceRequest(BaseModel):
    """Record attendance request."""
    event_id: str = Field(..., min_length=1, description="Event attended")
    rating: Optional[float] = Field(None, ge=1, le=5, description="Rating 1-5 (omit for unrated)")


class RatingRequest(BaseModel):
    """Update rating request."""
    rating: Optional[float] = Field(..., ge=1, le=5, description="New rating 1-5 (null for unrated)")


class AttendanceResponse(BaseModel):
    """Attendance response."""
    user_id: str
    event_id: str
    rating: Optional[float] = None

    @classmethod
    def from_edge(cls, edge: Edge) -> "AttendanceResponse":
        return cls(user_id=edge.source, event_id=edge.target, rating=edge.weight)


class FriendshipRequest(BaseModel):
    """Add friendship request."""
    friend_id: str = Field(..., min_length=1, description="User to befriend")


class FriendshipResponse(BaseModel):
    """Friendship response."""
    user_id: str
    friend_id: str
    created: bool


def _user_response(services, user: Vertex) -> UserResponse:
    return UserResponse(
        user_id=user.id,
        attended_events=list(user.attended_events),
        friends=[f.id for f in services.users.get_friends(user.id)]
    )


# Users

@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: CreateUserRequest, services: ServicesDep):
    """Create a user."""
    with services.lock:
        user = services.users.add_user(request.user_id)
        return _user_response(services, user)


@router.get("", response_model=UsersListResponse)
async def list_users(services: ServicesDep):
    """List all users."""
    with services.lock:
        users = [_user_response(services, u) for u in services.users.list_users()]
    return UsersListResponse(users=users, total=len(users))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, services: ServicesDep):
    """Get a user with attendance history and friends."""
    with services.lock:
        user = services.users.get_user(user_id)
        return _user_response(services, user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, services: ServicesDep):
    """Remove a user and every edge that touches it."""
    with services.lock:
        services.users.remove_user(user_id)


# Attendance

@router.post(
    "/{user_id}/attendance",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED
)
async def record_attendance(user_id: str, request: AttendanceRequest, services: ServicesDep):
    """
    Record that a user attended an event.

    Returns 409 if the attendance already exists; use PUT to change the rating.
    """
    with services.lock:
        edge = services.users.record_attendance(user_id, request.event_id, request.rating)
    return AttendanceResponse.from_edge(edge)


@router.put("/{user_id}/attendance/{event_id}", response_model=AttendanceResponse)
async def update_rating(user_id: str, event_id: str, request: RatingRequest, services: ServicesDep):
    """Change the rating of an existing attendance."""
    with services.lock:
        edge = services.users.update_rating(user_id, event_id, request.rating)
    return AttendanceResponse.from_edge(edge)


@router.delete("/{user_id}/attendance/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_attendance(user_id: str, event_id: str, services: ServicesDep):
    """Remove an attendance record."""
    with services.lock:
        services.users.remove_attendance(user_id, event_id)


# Friendships

@router.post("/{user_id}/friends", response_model=FriendshipResponse)
async def add_friend(user_id: str, request: FriendshipRequest, services: ServicesDep):
    """
    Befriend another user (both directions).

    Repeating the call is harmless; `created` is false the second time.
    """
    with services.lock:
        created = services.users.add_friendship(user_id, request.friend_id)
    return FriendshipResponse(user_id=user_id, friend_id=request.friend_id, created=created)


@router.delete("/{user_id}/friends/{friend_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_friend(user_id: str, friend_id: str, services: ServicesDep):
    """Remove a friendship."""
    with services.lock:
        services.users.remove_friendship(user_id, friend_id)
