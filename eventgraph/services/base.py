"""
Base service classes and shared context.

The ServiceContext holds the graph store and its persistence gateway.
This allows the CLI (main.py) and the API to share the same logic.
"""

import logging
from typing import Optional
from dataclasses import dataclass

from ..config import Config, load_config
from ..errors import NotFoundError, InvalidOperationError, PersistenceError
from ..graph import GraphStore, JsonGraphPersistence, Vertex, VertexType

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """
    Shared context for all services.

    Owns the single GraphStore for the process. Every mutating service
    call ends with persist(), which writes a full snapshot synchronously.
    """
    config: Config
    store: GraphStore
    persistence: Optional[JsonGraphPersistence] = None
    last_persistence_error: Optional[str] = None

    @classmethod
    def create(
        cls,
        config: Optional[Config] = None,
        persistence: Optional[JsonGraphPersistence] = None,
        in_memory: bool = False
    ) -> "ServiceContext":
        """
        Factory method to create a ServiceContext, restoring the last snapshot.

        Args:
            config: Optional config (loads from env if not provided)
            persistence: Optional gateway (defaults to the configured JSON file)
            in_memory: Skip persistence entirely

        Returns:
            Configured ServiceContext
        """
        cfg = config or load_config()

        if in_memory:
            persistence = None
        elif persistence is None:
            persistence = JsonGraphPersistence(cfg.storage.graph_file)

        store = None
        if persistence is not None:
            try:
                store = persistence.load()
            except PersistenceError as e:
                logger.warning(f"{e}, starting with an empty graph")

        if store is None:
            logger.info("No existing graph snapshot, starting with an empty graph")
            store = GraphStore()

        return cls(config=cfg, store=store, persistence=persistence)

    def persist(self) -> bool:
        """
        Write a snapshot of the current graph.

        Failures are logged and remembered but never undo the in-memory
        change that preceded them.

        Returns:
            True if the snapshot was written (or there is nowhere to write it)
        """
        if self.persistence is None:
            return True

        try:
            self.persistence.save(self.store)
        except PersistenceError as e:
            logger.error(str(e))
            self.last_persistence_error = str(e)
            return False

        self.last_persistence_error = None
        return True


class BaseService:
    """
    Base class for all services.

    Each service receives the shared context and provides focused functionality.
    """

    def __init__(self, context: ServiceContext):
        self.context = context

    @property
    def config(self) -> Config:
        return self.context.config

    @property
    def store(self) -> GraphStore:
        return self.context.store

    def require_vertex(self, vertex_id: str, vertex_type: VertexType) -> Vertex:
        """
        Look up a vertex of a given type.

        Raises:
            NotFoundError: If absent or of another type
        """
        vertex = self.store.get_vertex(vertex_id)
        if vertex is None or vertex.type != vertex_type:
            raise NotFoundError(f"{vertex_type.value} '{vertex_id}' does not exist")
        return vertex

    @staticmethod
    def require_id(vertex_id: str, label: str) -> str:
        """Reject empty or whitespace-only ids."""
        if not vertex_id or not vertex_id.strip():
            raise InvalidOperationError(f"{label} id must not be empty")
        return vertex_id
