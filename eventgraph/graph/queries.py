"""
Recommendation queries.

Derives event suggestions for a user by walking the graph outward from
their attendance history.
"""

import logging
from collections import deque
from typing import Dict, Optional, List, Set, Iterable

from .schema import Vertex, VertexType, normalize_id
from .store import GraphStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_RATING = 3.0


class RecommendationEngine:
    """
    Event recommendations over the event graph.

    Two policies:
    - Cold start (no attendance): every event tagged with one of the
      categories the requester picked
    - Warm start: bounded breadth-first traversal from the user through
      categories and friends
    """

    def __init__(self, store: GraphStore, min_rating: float = DEFAULT_MIN_RATING):
        """
        Initialize recommendation engine.

        Args:
            store: GraphStore instance
            min_rating: Lowest rating edge that makes an event a candidate
        """
        self.store = store
        self.min_rating = min_rating

    def preferred_categories(self, user: Vertex) -> Set[str]:
        """
        Union of the (normalized) categories of every event the user attended.

        Attended ids that no longer resolve to an event are skipped.
        """
        categories: Set[str] = set()
        for event_id in user.attended_events:
            event = self.store.get_vertex(event_id)
            if event is None or event.type != VertexType.EVENT:
                continue
            categories |= event.category_keys()
        return categories

    def recommend(
        self,
        user: Vertex,
        max_depth: int,
        categories: Optional[Iterable[str]] = None
    ) -> List[Vertex]:
        """
        Pick the policy from the user's attendance history and run it.

        Args:
            user: User vertex
            max_depth: Hop limit for the traversal (ignored for cold start)
            categories: Categories chosen by the requester, used only when
                the user has never attended an event

        Returns:
            Events in discovery order
        """
        if user.type != VertexType.USER:
            raise ValueError(f"'{user.id}' is not a user")

        if not user.attended_events:
            if not categories:
                logger.info(f"No attendance and no categories chosen for {user.id}; nothing to recommend")
                return []
            return self.recommend_for_categories(categories)

        return self.recommend_by_traversal(user, max_depth)

    def recommend_for_categories(self, categories: Iterable[str]) -> List[Vertex]:
        """
        Cold start: every event tagged with any of the given categories.

        Args:
            categories: Category names (matched case-insensitively)

        Returns:
            Matching events in graph order
        """
        wanted = {normalize_id(c) for c in categories}
        return [
            v for v in self.store.get_vertices_by_type(VertexType.EVENT)
            if v.category_keys() & wanted
        ]

    def recommend_by_traversal(self, user: Vertex, max_depth: int) -> List[Vertex]:
        """
        Warm start: breadth-first search from the user, at most max_depth hops.

        Candidate events are leaves: they are collected but never expanded.
        Categories, other users, and the events the user attended (the way
        into the user's own categories) are expanded once each. An event is
        admitted when either
        - it hangs off a user by a rating edge of at least min_rating, or
        - it hangs off a category and shares a category with the user's
          attended events,
        and the user has not attended it yet.

        Args:
            user: User vertex with attendance history
            max_depth: Hop limit

        Returns:
            Events in the order they were first admitted
        """
        recommendations: List[Vertex] = []
        admitted: Set[str] = set()
        attended = {normalize_id(e) for e in user.attended_events}
        preferred = self.preferred_categories(user)

        visited: Set[str] = {user.key}
        depths: Dict[str, int] = {user.key: 0}
        queue = deque([user])

        while queue:
            current = queue.popleft()
            depth = depths[current.key]

            if depth >= max_depth:
                continue

            for edge in self.store.outgoing_edges(current):
                neighbor = self.store.neighbor(edge)
                if neighbor is None or neighbor.key in visited:
                    continue

                if neighbor.type == VertexType.EVENT and neighbor.key not in attended:
                    if neighbor.key in admitted:
                        continue

                    if current.type == VertexType.USER:
                        eligible = edge.weight is not None and edge.weight >= self.min_rating
                    elif current.type == VertexType.CATEGORY:
                        eligible = bool(neighbor.category_keys() & preferred)
                    else:
                        eligible = False

                    if eligible:
                        admitted.add(neighbor.key)
                        recommendations.append(neighbor)
                    continue

                visited.add(neighbor.key)
                depths[neighbor.key] = depth + 1
                queue.append(neighbor)

        logger.debug(
            f"Traversal for {user.id} (max_depth={max_depth}) "
            f"visited {len(visited)} vertices, admitted {len(recommendations)} events"
        )
        return recommendations
