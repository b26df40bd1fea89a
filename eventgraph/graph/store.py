"""
Graph storage using NetworkX.

Holds the vertices and edges of the event graph in memory. Persistence is
handled by a separate gateway (see persistence.py).
"""

import logging
from typing import Dict, Any, Optional, List, Iterator, Union

import networkx as nx

from .schema import Vertex, Edge, VertexType, EdgeType, normalize_id

logger = logging.getLogger(__name__)

VertexRef = Union[str, Vertex]


def _key(ref: VertexRef) -> str:
    """Normalized storage key for a vertex or raw id."""
    if isinstance(ref, Vertex):
        return ref.key
    return normalize_id(ref)


class GraphStore:
    """
    NetworkX-based graph storage.

    Provides:
    - Vertex registry keyed by normalized id
    - Directed edges with at most one edge per (source, target) pair
    - Cascading edge removal when a vertex is deleted

    Each node carries its Vertex under the "vertex" attribute and each
    arc carries its Edge under the "edge" attribute. DiGraph keeps
    successors in insertion order, so outgoing edges come back in the
    order they were added.
    """

    def __init__(self):
        self.graph = nx.DiGraph()

    # === Vertex Operations ===

    def add_vertex(self, vertex: Vertex) -> None:
        """
        Insert a vertex, replacing whatever occupies its key.

        A replaced vertex starts with no outgoing edges; edges from other
        vertices that point at the key are left in place.

        Args:
            vertex: Vertex to add
        """
        key = vertex.key
        if self.graph.has_node(key):
            logger.debug(f"Overwriting vertex at key '{key}'")
            self.graph.remove_edges_from(list(self.graph.out_edges(key)))

        self.graph.add_node(key, vertex=vertex)

    def get_vertex(self, vertex_id: str) -> Optional[Vertex]:
        """
        Get a vertex by id (case and surrounding whitespace are ignored).

        Args:
            vertex_id: Vertex identifier

        Returns:
            Vertex if found, None otherwise
        """
        key = normalize_id(vertex_id)
        if not self.graph.has_node(key):
            return None
        return self.graph.nodes[key]["vertex"]

    def contains_vertex(self, vertex_id: str) -> bool:
        """Check if a vertex exists."""
        return self.graph.has_node(normalize_id(vertex_id))

    def remove_vertex(self, vertex_id: str) -> bool:
        """
        Delete a vertex and every edge that touches it.

        Args:
            vertex_id: Vertex identifier

        Returns:
            True if deleted, False if not found
        """
        key = normalize_id(vertex_id)
        if not self.graph.has_node(key):
            return False

        self.graph.remove_node(key)
        return True

    def vertices(self) -> List[Vertex]:
        """All vertices in insertion order."""
        return [attrs["vertex"] for _, attrs in self.graph.nodes(data=True)]

    def get_vertices_by_type(self, vertex_type: VertexType) -> List[Vertex]:
        """
        Get all vertices of a specific type.

        Args:
            vertex_type: Type of vertices to find

        Returns:
            List of matching vertices
        """
        return [v for v in self.vertices() if v.type == vertex_type]

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices())

    # === Edge Operations ===

    def add_edge(
        self,
        source: VertexRef,
        target: VertexRef,
        weight: Optional[float] = None,
        edge_type: Optional[EdgeType] = None
    ) -> bool:
        """
        Add a directed edge unless one already joins the same pair.

        An existing edge is never replaced, whatever its weight.

        Args:
            source: Source vertex or id
            target: Target vertex or id
            weight: Optional weight (rating for attendance edges)
            edge_type: Optional relationship label

        Returns:
            True if added, False if already exists or an endpoint is missing
        """
        src_key, dst_key = _key(source), _key(target)
        if not (self.graph.has_node(src_key) and self.graph.has_node(dst_key)):
            logger.warning(f"Cannot add edge {src_key} -> {dst_key}: endpoint not in graph")
            return False

        if self.graph.has_edge(src_key, dst_key):
            return False

        edge = Edge(
            source=self.graph.nodes[src_key]["vertex"].id,
            target=self.graph.nodes[dst_key]["vertex"].id,
            weight=weight,
            type=edge_type
        )
        self.graph.add_edge(src_key, dst_key, edge=edge)
        return True

    def update_edge(self, edge: Edge) -> bool:
        """
        Replace the stored edge for (edge.source, edge.target).

        Args:
            edge: Edge carrying the new weight/type

        Returns:
            True if updated, False if not found
        """
        src_key, dst_key = _key(edge.source), _key(edge.target)
        if not self.graph.has_edge(src_key, dst_key):
            return False

        self.graph.edges[src_key, dst_key]["edge"] = edge
        return True

    def get_edge(self, source: VertexRef, target: VertexRef) -> Optional[Edge]:
        """
        Get an edge by source and target.

        Returns:
            Edge if found, None otherwise
        """
        src_key, dst_key = _key(source), _key(target)
        if not self.graph.has_edge(src_key, dst_key):
            return None
        return self.graph.edges[src_key, dst_key]["edge"]

    def remove_edge(self, source: VertexRef, target: VertexRef) -> bool:
        """
        Delete the edge from source to target.

        Returns:
            True if deleted, False if not found
        """
        src_key, dst_key = _key(source), _key(target)
        if not self.graph.has_edge(src_key, dst_key):
            return False

        self.graph.remove_edge(src_key, dst_key)
        return True

    def has_edge(self, source: VertexRef, target: VertexRef) -> bool:
        """Check if an edge exists."""
        return self.graph.has_edge(_key(source), _key(target))

    def outgoing_edges(self, vertex: VertexRef) -> List[Edge]:
        """
        Outgoing edges of a vertex in insertion order.

        Args:
            vertex: Vertex or id

        Returns:
            List of edges (empty if the vertex is unknown)
        """
        key = _key(vertex)
        if not self.graph.has_node(key):
            return []
        return [attrs["edge"] for _, _, attrs in self.graph.out_edges(key, data=True)]

    def edges(self) -> List[Edge]:
        """All edges, grouped by source in vertex order."""
        return [attrs["edge"] for _, _, attrs in self.graph.edges(data=True)]

    def neighbor(self, edge: Edge) -> Optional[Vertex]:
        """Resolve the target vertex of an edge."""
        return self.get_vertex(edge.target)

    def clear(self):
        """Remove every vertex and edge."""
        self.graph.clear()

    # === Statistics ===

    def stats(self) -> Dict[str, Any]:
        """Get graph statistics."""
        vertex_counts: Dict[str, int] = {}
        for vertex in self.vertices():
            vertex_counts[vertex.type.value] = vertex_counts.get(vertex.type.value, 0) + 1

        edge_counts: Dict[str, int] = {}
        for edge in self.edges():
            edge_type = edge.type.value if edge.type else "Unknown"
            edge_counts[edge_type] = edge_counts.get(edge_type, 0) + 1

        return {
            "total_vertices": self.graph.number_of_nodes(),
            "total_edges": self.graph.number_of_edges(),
            "vertices_by_type": vertex_counts,
            "edges_by_type": edge_counts
        }
