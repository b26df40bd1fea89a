"""
User service.

Handles users, their attendance history (with ratings) and friendships.
"""

import logging
import math
from typing import Any, List, Optional

from .base import BaseService
from ..errors import AlreadyExistsError, InvalidOperationError, InvalidRatingError, NotFoundError
from ..graph import Edge, EdgeType, Vertex, VertexType, normalize_id
from ..graph.schema import create_user_vertex

logger = logging.getLogger(__name__)

RATING_MIN = 1.0
RATING_MAX = 5.0


def validate_rating(rating: Any) -> Optional[float]:
    """
    Coerce a rating to float and check its range.

    Args:
        rating: Number, numeric string, or None for "unrated"

    Returns:
        Rating as float, or None

    Raises:
        InvalidRatingError: If not a number in [RATING_MIN, RATING_MAX]
    """
    if rating is None:
        return None
    if isinstance(rating, bool):
        raise InvalidRatingError(f"Invalid rating: {rating!r}")

    try:
        value = float(rating)
    except (TypeError, ValueError):
        raise InvalidRatingError(f"Invalid rating: {rating!r}. Enter a number.")

    if math.isnan(value) or not RATING_MIN <= value <= RATING_MAX:
        raise InvalidRatingError(
            f"Invalid rating: {rating!r}. Enter a value between {RATING_MIN:g} and {RATING_MAX:g}."
        )
    return value


class UserService(BaseService):
    """
    Service for users, attendance and friendships.

    Provides:
    - Add/remove users
    - Recording attendance as a rated user->event edge
    - Bidirectional friendships
    """

    # === Users ===

    def add_user(self, user_id: str) -> Vertex:
        """
        Add a new user.

        Raises:
            AlreadyExistsError: If any vertex already uses this id
        """
        self.require_id(user_id, "User")
        if self.store.contains_vertex(user_id):
            raise AlreadyExistsError(f"User '{user_id}' already exists")

        user = create_user_vertex(user_id)
        self.store.add_vertex(user)
        self.context.persist()

        logger.info(f"User added: {user_id}")
        return user

    def remove_user(self, user_id: str):
        """
        Remove a user together with its attendance and friendship edges.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.require_vertex(user_id, VertexType.USER)
        self.store.remove_vertex(user.id)
        self.context.persist()

        logger.info(f"User removed: {user.id}")

    def get_user(self, user_id: str) -> Vertex:
        """Get a user by id."""
        return self.require_vertex(user_id, VertexType.USER)

    def list_users(self) -> List[Vertex]:
        """All users in graph order."""
        return self.store.get_vertices_by_type(VertexType.USER)

    # === Attendance ===

    def record_attendance(self, user_id: str, event_id: str, rating: Any = None) -> Edge:
        """
        Record that a user attended an event.

        Adds a user->event edge weighted by the rating and appends the
        event to the user's attendance history.

        Args:
            user_id: User id
            event_id: Event id
            rating: Rating in [1, 5], or None for unrated

        Returns:
            The attendance edge

        Raises:
            NotFoundError: If user or event does not exist
            InvalidRatingError: If the rating is out of range
            AlreadyExistsError: If the user already attended the event
                (use update_rating to change a rating)
        """
        value = validate_rating(rating)
        user = self.require_vertex(user_id, VertexType.USER)
        event = self.require_vertex(event_id, VertexType.EVENT)

        if user.has_attended(event.id):
            raise AlreadyExistsError(f"{user.id} has already attended {event.id}")

        self.store.add_edge(user, event, weight=value, edge_type=EdgeType.ATTENDED)
        user.attended_events.append(event.id)
        self.context.persist()

        logger.info(f"Attendance recorded: {user.id} -> {event.id} (rating={value})")
        return self.store.get_edge(user, event)

    def update_rating(self, user_id: str, event_id: str, rating: Any) -> Edge:
        """
        Replace the rating on an existing attendance.

        Raises:
            NotFoundError: If user/event is missing or the user never attended
            InvalidRatingError: If the rating is out of range
        """
        value = validate_rating(rating)
        user = self.require_vertex(user_id, VertexType.USER)
        event = self.require_vertex(event_id, VertexType.EVENT)

        if not user.has_attended(event.id):
            raise NotFoundError(f"{user.id} has not attended {event.id}")

        edge = Edge(source=user.id, target=event.id, weight=value, type=EdgeType.ATTENDED)
        if not self.store.update_edge(edge):
            self.store.add_edge(user, event, weight=value, edge_type=EdgeType.ATTENDED)
        self.context.persist()

        logger.info(f"Rating updated: {user.id} -> {event.id} (rating={value})")
        return self.store.get_edge(user, event)

    def remove_attendance(self, user_id: str, event_id: str):
        """
        Drop an attendance record and its rating edge.

        Raises:
            NotFoundError: If user/event is missing or the user never attended
        """
        user = self.require_vertex(user_id, VertexType.USER)
        event = self.require_vertex(event_id, VertexType.EVENT)

        if not user.has_attended(event.id):
            raise NotFoundError(f"{user.id} has not attended {event.id}")

        key = event.key
        user.attended_events[:] = [e for e in user.attended_events if normalize_id(e) != key]
        self.store.remove_edge(user, event)
        self.context.persist()

        logger.info(f"Attendance removed: {user.id} -> {event.id}")

    def get_attended_events(self, user_id: str) -> List[Vertex]:
        """Events the user attended, oldest first."""
        user = self.require_vertex(user_id, VertexType.USER)
        events = []
        for event_id in user.attended_events:
            event = self.store.get_vertex(event_id)
            if event is not None:
                events.append(event)
        return events

    # === Friendships ===

    def add_friendship(self, user_id1: str, user_id2: str) -> bool:
        """
        Link two users in both directions.

        Calling it again for the same pair changes nothing.

        Returns:
            True if at least one edge was created

        Raises:
            NotFoundError: If either user does not exist
            InvalidOperationError: If both ids name the same user
        """
        user1 = self.require_vertex(user_id1, VertexType.USER)
        user2 = self.require_vertex(user_id2, VertexType.USER)

        if user1.key == user2.key:
            raise InvalidOperationError("A user cannot befriend themself")

        created = self.store.add_edge(user1, user2, edge_type=EdgeType.FRIEND_OF)
        created = self.store.add_edge(user2, user1, edge_type=EdgeType.FRIEND_OF) or created
        self.context.persist()

        logger.info(f"Friendship added between {user1.id} and {user2.id}")
        return created

    def remove_friendship(self, user_id1: str, user_id2: str):
        """
        Remove the friendship edges between two users.

        Raises:
            NotFoundError: If either user is missing or they are not friends
        """
        user1 = self.require_vertex(user_id1, VertexType.USER)
        user2 = self.require_vertex(user_id2, VertexType.USER)

        if not (self.store.has_edge(user1, user2) or self.store.has_edge(user2, user1)):
            raise NotFoundError(f"{user1.id} and {user2.id} are not friends")

        self.store.remove_edge(user1, user2)
        self.store.remove_edge(user2, user1)
        self.context.persist()

        logger.info(f"Friendship removed between {user1.id} and {user2.id}")

    def get_friends(self, user_id: str) -> List[Vertex]:
        """Users this user has a friendship edge to."""
        user = self.require_vertex(user_id, VertexType.USER)
        friends = []
        for edge in self.store.outgoing_edges(user):
            neighbor = self.store.neighbor(edge)
            if neighbor is not None and neighbor.type == VertexType.USER:
                friends.append(neighbor)
        return friends
