"""
Graph persistence.

Serializes the whole GraphStore to a JSON snapshot and back. The snapshot is
written in one piece after every mutation and read once at startup.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from ..errors import PersistenceError
from .schema import Vertex, Edge
from .store import GraphStore

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "1.0"


def snapshot(store: GraphStore) -> Dict[str, Any]:
    """
    Serialize a store into a JSON-compatible dictionary.

    Vertices and edges keep their insertion order so that a restored
    store iterates exactly like the original.
    """
    return {
        "nodes": [v.to_dict() for v in store.vertices()],
        "edges": [e.to_dict() for e in store.edges()],
        "metadata": {
            "version": SNAPSHOT_VERSION,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }
    }


def restore(data: Dict[str, Any]) -> GraphStore:
    """
    Rebuild a store from a snapshot dictionary.

    Raises:
        PersistenceError: If the snapshot is malformed
    """
    store = GraphStore()
    try:
        for node_data in data.get("nodes", []):
            store.add_vertex(Vertex.from_dict(node_data))

        for edge_data in data.get("edges", []):
            edge = Edge.from_dict(edge_data)
            if not store.add_edge(edge.source, edge.target, edge.weight, edge.type):
                logger.warning(f"Skipping edge {edge.source} -> {edge.target} from snapshot")
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PersistenceError(f"Malformed graph snapshot: {e}") from e

    return store


class JsonGraphPersistence:
    """
    JSON file persistence for the event graph.

    Writes go to a temporary file in the same directory which then
    replaces the target, so readers never see a half-written snapshot.
    """

    def __init__(self, file_path: Path):
        """
        Initialize persistence gateway.

        Args:
            file_path: Path to the JSON snapshot
        """
        self.file_path = Path(file_path)

    def exists(self) -> bool:
        return self.file_path.exists()

    def save(self, store: GraphStore):
        """
        Write a full snapshot of the store.

        Raises:
            PersistenceError: On any I/O failure
        """
        data = snapshot(store)
        tmp_path = None
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self.file_path.parent,
                prefix=f".{self.file_path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8"
            ) as f:
                tmp_path = f.name
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Failed to save graph to {self.file_path}: {e}") from e

        logger.debug(f"Saved graph: {len(data['nodes'])} vertices, {len(data['edges'])} edges")

    def load(self) -> Optional[GraphStore]:
        """
        Read the snapshot from disk.

        Returns:
            Restored GraphStore, or None when no snapshot exists yet

        Raises:
            PersistenceError: If the file cannot be read or parsed
        """
        if not self.file_path.exists():
            return None

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to load graph from {self.file_path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceError(f"Unexpected snapshot format in {self.file_path}")

        store = restore(data)
        logger.info(f"Loaded graph: {len(store)} vertices, {len(store.edges())} edges")
        return store
