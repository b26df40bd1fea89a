"""
Unit tests for graph persistence.

Tests JSON snapshots, restore, and how the service context reacts
to missing, corrupt or unwritable snapshot files.
"""

import json
from unittest.mock import patch

import pytest

from eventgraph.errors import PersistenceError
from eventgraph.graph import JsonGraphPersistence, snapshot, restore
from eventgraph.services import ServiceContext, create_services


class TestSnapshot:
    """Tests for snapshot/restore."""

    @pytest.mark.unit
    def test_snapshot_layout(self, seeded, context):
        data = snapshot(context.store)

        assert set(data) == {"nodes", "edges", "metadata"}
        assert data["metadata"]["version"] == "1.0"
        assert len(data["nodes"]) == 16
        assert data["nodes"][0] == {"id": "concert", "type": "Category"}

    @pytest.mark.unit
    def test_restore_keeps_order_weights_and_attendance(self, seeded, context):
        restored = restore(snapshot(context.store))

        assert [v.id for v in restored.vertices()] == [v.id for v in context.store.vertices()]
        assert restored.get_edge("C", "Mads Comedy Night").weight == 2.0
        assert restored.get_edge("ComedyClash", "comedy").weight is None
        assert restored.get_vertex("b").attended_events == [
            "FantasticDuoConcert", "VarietyCharityConcert"
        ]
        assert restored.stats() == context.store.stats()

    @pytest.mark.unit
    def test_restore_skips_dangling_edges(self):
        data = {
            "nodes": [{"id": "U", "type": "User"}],
            "edges": [{"source": "U", "target": "Gone", "weight": 4, "type": "ATTENDED"}],
        }
        restored = restore(data)

        assert len(restored) == 1
        assert restored.edges() == []

    @pytest.mark.unit
    def test_restore_rejects_unknown_vertex_type(self):
        with pytest.raises(PersistenceError):
            restore({"nodes": [{"id": "x", "type": "Venue"}], "edges": []})

    @pytest.mark.unit
    def test_restore_rejects_missing_id(self):
        with pytest.raises(PersistenceError):
            restore({"nodes": [{"type": "User"}], "edges": []})


class TestJsonGraphPersistence:
    """Tests for the JSON file gateway."""

    @pytest.mark.unit
    def test_load_missing_file(self, persistence):
        assert not persistence.exists()
        assert persistence.load() is None

    @pytest.mark.unit
    def test_save_then_load(self, seeded, context, persistence):
        persistence.save(context.store)
        loaded = persistence.load()

        assert len(loaded) == len(context.store)
        assert loaded.get_edge("A", "ComedyClash").weight == 4.0

    @pytest.mark.unit
    def test_save_creates_parent_directory(self, temp_data_dir, store):
        gateway = JsonGraphPersistence(temp_data_dir / "nested" / "graph.json")
        gateway.save(store)

        assert gateway.exists()

    @pytest.mark.unit
    def test_save_leaves_no_temp_files(self, seeded, context, persistence, temp_data_dir):
        persistence.save(context.store)
        assert [p.name for p in temp_data_dir.iterdir()] == ["event_graph.json"]

    @pytest.mark.unit
    def test_corrupt_file(self, graph_file, persistence):
        graph_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(PersistenceError):
            persistence.load()

    @pytest.mark.unit
    def test_non_object_payload(self, graph_file, persistence):
        graph_file.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

        with pytest.raises(PersistenceError):
            persistence.load()

    @pytest.mark.unit
    def test_save_failure_raises(self, store, persistence):
        with patch("eventgraph.graph.persistence.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceError, match="disk full"):
                persistence.save(store)


class TestServiceContextPersistence:
    """Write-through and startup behavior of the service context."""

    @pytest.mark.unit
    def test_mutation_writes_snapshot(self, user_service, graph_file):
        user_service.add_user("Alice")

        data = json.loads(graph_file.read_text(encoding="utf-8"))
        assert {"id": "Alice", "type": "User", "attended_events": []} in data["nodes"]

    @pytest.mark.unit
    def test_restart_restores_graph(self, seeded, user_service, test_config, persistence):
        user_service.add_friendship("A", "B")

        _, users, _, recommendations, _ = create_services(
            ServiceContext.create(config=test_config, persistence=persistence)
        )

        assert [f.id for f in users.get_friends("A")] == ["B"]
        assert [e.id for e in recommendations.recommend("A")][:2] == [
            "FantasticDuoConcert", "VarietyCharityConcert"
        ]

    @pytest.mark.unit
    def test_corrupt_snapshot_starts_empty(self, graph_file, test_config, persistence):
        graph_file.write_text("garbage", encoding="utf-8")

        context = ServiceContext.create(config=test_config, persistence=persistence)
        assert len(context.store) == 0

    @pytest.mark.unit
    def test_failed_save_keeps_change_and_records_error(self, context, user_service):
        with patch.object(context.persistence, "save", side_effect=PersistenceError("read-only")):
            user_service.add_user("Alice")

        assert context.store.contains_vertex("alice")
        assert context.last_persistence_error == "read-only"

    @pytest.mark.unit
    def test_successful_save_clears_error(self, context, user_service):
        context.last_persistence_error = "earlier failure"
        user_service.add_user("Alice")

        assert context.last_persistence_error is None

    @pytest.mark.unit
    def test_in_memory_context_never_writes(self, test_config, graph_file):
        context = ServiceContext.create(config=test_config, in_memory=True)
        _, users, _, _, _ = create_services(context)
        users.add_user("Alice")

        assert context.persistence is None
        assert not graph_file.exists()
