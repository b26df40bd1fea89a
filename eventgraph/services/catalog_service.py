"""
Catalog service.

Manages events and the categories they are tagged with.
"""

import logging
from typing import List, Iterable

from .base import BaseService
from ..errors import AlreadyExistsError, InvalidOperationError
from ..graph import EdgeType, Vertex, VertexType, normalize_id
from ..graph.schema import create_category_vertex, create_event_vertex

logger = logging.getLogger(__name__)


def clean_categories(categories: Iterable[str]) -> List[str]:
    """
    Strip category names and drop blanks and case-insensitive repeats.

    The first spelling of each name wins.
    """
    seen = set()
    cleaned = []
    for name in categories:
        name = (name or "").strip()
        if not name or normalize_id(name) in seen:
            continue
        seen.add(normalize_id(name))
        cleaned.append(name)
    return cleaned


class CatalogService(BaseService):
    """
    Service for events and categories.

    Event <-> Category links are always created in both directions so the
    traversal can move from a topic to its events and back.
    """

    # === Categories ===

    def add_category(self, category_id: str) -> Vertex:
        """
        Add a new category.

        Raises:
            AlreadyExistsError: If any vertex already uses this id
        """
        self.require_id(category_id, "Category")
        if self.store.contains_vertex(category_id):
            raise AlreadyExistsError(f"Category '{category_id}' already exists")

        category = create_category_vertex(category_id)
        self.store.add_vertex(category)
        self.context.persist()

        logger.info(f"Category added: {category_id}")
        return category

    def remove_category(self, category_id: str):
        """
        Remove a category and untag every event that referenced it.

        Raises:
            NotFoundError: If the category does not exist
        """
        category = self.require_vertex(category_id, VertexType.CATEGORY)
        key = category.key

        self.store.remove_vertex(category.id)
        for event in self.store.get_vertices_by_type(VertexType.EVENT):
            event.categories[:] = [c for c in event.categories if normalize_id(c) != key]
        self.context.persist()

        logger.info(f"Category removed: {category.id}")

    def list_categories(self) -> List[Vertex]:
        """All categories in graph order."""
        return self.store.get_vertices_by_type(VertexType.CATEGORY)

    def events_in_category(self, category_id: str) -> List[Vertex]:
        """Events linked from a category, in the order they were tagged."""
        category = self.require_vertex(category_id, VertexType.CATEGORY)
        events = []
        for edge in self.store.outgoing_edges(category):
            neighbor = self.store.neighbor(edge)
            if neighbor is not None and neighbor.type == VertexType.EVENT:
                events.append(neighbor)
        return events

    # === Events ===

    def add_event(self, event_id: str, categories: Iterable[str]) -> Vertex:
        """
        Add an event tagged with one or more categories.

        Missing categories are created on the fly. Each category gets an
        event->category and a category->event edge.

        Args:
            event_id: Event id
            categories: Category names

        Returns:
            Event vertex

        Raises:
            AlreadyExistsError: If the id is taken, or a category name is
                already used by a user or event
            InvalidOperationError: If the event lists itself as a category
        """
        self.require_id(event_id, "Event")
        if self.store.contains_vertex(event_id):
            raise AlreadyExistsError(f"Event '{event_id}' already exists")

        names = clean_categories(categories)

        # Validate every category before touching the graph
        for name in names:
            if normalize_id(name) == normalize_id(event_id):
                raise InvalidOperationError(f"Event '{event_id}' cannot be its own category")
            existing = self.store.get_vertex(name)
            if existing is not None and existing.type != VertexType.CATEGORY:
                raise AlreadyExistsError(
                    f"'{name}' already exists as a {existing.type.value}, not a Category"
                )

        event = create_event_vertex(event_id, names)
        self.store.add_vertex(event)

        for name in names:
            category = self.store.get_vertex(name)
            if category is None:
                category = create_category_vertex(name)
                self.store.add_vertex(category)
                logger.info(f"Category added: {name}")

            self.store.add_edge(event, category, edge_type=EdgeType.IN_CATEGORY)
            self.store.add_edge(category, event, edge_type=EdgeType.HAS_EVENT)

        self.context.persist()

        logger.info(f"Event added: {event_id} {names}")
        return event

    def remove_event(self, event_id: str):
        """
        Remove an event, its edges, and every attendance record of it.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = self.require_vertex(event_id, VertexType.EVENT)
        key = event.key

        self.store.remove_vertex(event.id)
        for user in self.store.get_vertices_by_type(VertexType.USER):
            user.attended_events[:] = [e for e in user.attended_events if normalize_id(e) != key]
        self.context.persist()

        logger.info(f"Event removed: {event.id}")

    def get_event(self, event_id: str) -> Vertex:
        """Get an event by id."""
        return self.require_vertex(event_id, VertexType.EVENT)

    def list_events(self) -> List[Vertex]:
        """All events in graph order."""
        return self.store.get_vertices_by_type(VertexType.EVENT)
