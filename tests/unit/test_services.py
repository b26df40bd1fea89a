"""
Unit tests for the service layer.

Tests users, attendance, friendships, the event catalog and
whole-graph operations.
"""

import pytest

from eventgraph.errors import (
    AlreadyExistsError, InvalidOperationError, InvalidRatingError, NotFoundError
)
from eventgraph.graph import EdgeType
from eventgraph.services import validate_rating
from eventgraph.services.catalog_service import clean_categories


class TestValidateRating:
    """Tests for rating validation."""

    @pytest.mark.unit
    @pytest.mark.parametrize("raw,expected", [(1, 1.0), (5, 5.0), ("3.5", 3.5), (None, None)])
    def test_valid(self, raw, expected):
        assert validate_rating(raw) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", [0, 5.5, -1, "abc", "nan", True, [4]])
    def test_invalid(self, raw):
        with pytest.raises(InvalidRatingError):
            validate_rating(raw)


class TestUsers:
    """Tests for user management."""

    @pytest.mark.unit
    def test_add_and_get(self, user_service):
        user_service.add_user("Alice")

        assert user_service.get_user(" alice ").id == "Alice"
        assert [u.id for u in user_service.list_users()] == ["Alice"]

    @pytest.mark.unit
    def test_duplicate_user(self, user_service):
        user_service.add_user("Alice")

        with pytest.raises(AlreadyExistsError, match="User 'ALICE' already exists"):
            user_service.add_user("ALICE")

    @pytest.mark.unit
    def test_id_taken_by_event(self, user_service, catalog_service):
        catalog_service.add_event("Gig", ["concert"])

        with pytest.raises(AlreadyExistsError):
            user_service.add_user("gig")

    @pytest.mark.unit
    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_id(self, user_service, blank):
        with pytest.raises(InvalidOperationError):
            user_service.add_user(blank)

    @pytest.mark.unit
    def test_remove_user_drops_edges(self, seeded, user_service, context):
        user_service.add_friendship("A", "B")
        user_service.remove_user("a")

        assert not context.store.contains_vertex("A")
        assert [f.id for f in user_service.get_friends("B")] == []

    @pytest.mark.unit
    def test_remove_missing_user(self, user_service):
        with pytest.raises(NotFoundError, match="User 'ghost' does not exist"):
            user_service.remove_user("ghost")

    @pytest.mark.unit
    def test_event_is_not_a_user(self, catalog_service, user_service):
        catalog_service.add_event("Gig", ["concert"])

        with pytest.raises(NotFoundError):
            user_service.get_user("Gig")


class TestAttendance:
    """Tests for attendance and ratings."""

    @pytest.fixture
    def gig(self, user_service, catalog_service):
        user_service.add_user("Alice")
        catalog_service.add_event("Gig", ["concert"])

    @pytest.mark.unit
    def test_record_attendance(self, gig, user_service, context):
        edge = user_service.record_attendance("alice", "gig", 4)

        assert (edge.source, edge.target, edge.weight) == ("Alice", "Gig", 4.0)
        assert edge.type == EdgeType.ATTENDED
        assert context.store.get_vertex("Alice").attended_events == ["Gig"]

    @pytest.mark.unit
    def test_unrated_attendance(self, gig, user_service):
        assert user_service.record_attendance("Alice", "Gig").weight is None

    @pytest.mark.unit
    def test_duplicate_attendance_rejected(self, gig, user_service, context):
        user_service.record_attendance("Alice", "Gig", 4)

        with pytest.raises(AlreadyExistsError, match="Alice has already attended Gig"):
            user_service.record_attendance("ALICE", "gig", 1)

        assert context.store.get_edge("Alice", "Gig").weight == 4.0
        assert context.store.get_vertex("Alice").attended_events == ["Gig"]

    @pytest.mark.unit
    def test_invalid_rating_changes_nothing(self, gig, user_service, context):
        with pytest.raises(InvalidRatingError):
            user_service.record_attendance("Alice", "Gig", 9)

        assert context.store.get_vertex("Alice").attended_events == []
        assert not context.store.has_edge("Alice", "Gig")

    @pytest.mark.unit
    def test_attend_missing_event(self, gig, user_service):
        with pytest.raises(NotFoundError, match="Event 'Rave' does not exist"):
            user_service.record_attendance("Alice", "Rave", 3)

    @pytest.mark.unit
    def test_update_rating(self, gig, user_service):
        user_service.record_attendance("Alice", "Gig", 4)

        assert user_service.update_rating("Alice", "Gig", 2).weight == 2.0

    @pytest.mark.unit
    def test_update_rating_requires_attendance(self, gig, user_service):
        with pytest.raises(NotFoundError):
            user_service.update_rating("Alice", "Gig", 2)

    @pytest.mark.unit
    def test_remove_attendance(self, gig, user_service, context):
        user_service.record_attendance("Alice", "Gig", 4)
        user_service.remove_attendance("Alice", "Gig")

        assert user_service.get_attended_events("Alice") == []
        assert not context.store.has_edge("Alice", "Gig")

    @pytest.mark.unit
    def test_attended_events_in_order(self, seeded, user_service):
        assert [e.id for e in user_service.get_attended_events("C")] == [
            "PythonWorkshop", "AI Bootcamp", "Mads Comedy Night"
        ]


class TestFriendships:
    """Tests for friendships."""

    @pytest.fixture
    def pair(self, user_service):
        user_service.add_user("Alice")
        user_service.add_user("Bob")

    @pytest.mark.unit
    def test_friendship_is_bidirectional(self, pair, user_service, context):
        assert user_service.add_friendship("Alice", "Bob") is True

        assert context.store.get_edge("Alice", "Bob").type == EdgeType.FRIEND_OF
        assert context.store.get_edge("Bob", "Alice").type == EdgeType.FRIEND_OF

    @pytest.mark.unit
    def test_friendship_is_idempotent(self, pair, user_service, context):
        user_service.add_friendship("Alice", "Bob")

        assert user_service.add_friendship("bob", "alice") is False
        friend_edges = [e for e in context.store.edges() if e.type == EdgeType.FRIEND_OF]
        assert len(friend_edges) == 2

    @pytest.mark.unit
    def test_self_friendship(self, pair, user_service):
        with pytest.raises(InvalidOperationError):
            user_service.add_friendship("Alice", " alice")

    @pytest.mark.unit
    def test_friend_must_exist(self, pair, user_service):
        with pytest.raises(NotFoundError):
            user_service.add_friendship("Alice", "Carol")

    @pytest.mark.unit
    def test_remove_friendship(self, pair, user_service):
        user_service.add_friendship("Alice", "Bob")
        user_service.remove_friendship("Bob", "Alice")

        assert user_service.get_friends("Alice") == []
        assert user_service.get_friends("Bob") == []

    @pytest.mark.unit
    def test_remove_missing_friendship(self, pair, user_service):
        with pytest.raises(NotFoundError, match="not friends"):
            user_service.remove_friendship("Alice", "Bob")


class TestCatalog:
    """Tests for events and categories."""

    @pytest.mark.unit
    def test_clean_categories(self):
        assert clean_categories([" Comedy", "", "comedy ", "Theatre", "  "]) == ["Comedy", "Theatre"]

    @pytest.mark.unit
    def test_add_event_creates_categories(self, catalog_service, context):
        catalog_service.add_event("Gig", ["concert", "charity"])

        assert [c.id for c in catalog_service.list_categories()] == ["concert", "charity"]
        assert context.store.get_edge("Gig", "concert").type == EdgeType.IN_CATEGORY
        assert context.store.get_edge("concert", "Gig").type == EdgeType.HAS_EVENT

    @pytest.mark.unit
    def test_add_event_reuses_category_case_insensitively(self, catalog_service):
        catalog_service.add_category("Comedy")
        catalog_service.add_event("Show", ["comedy"])

        assert [c.id for c in catalog_service.list_categories()] == ["Comedy"]
        assert [e.id for e in catalog_service.events_in_category("COMEDY")] == ["Show"]

    @pytest.mark.unit
    def test_duplicate_event(self, catalog_service):
        catalog_service.add_event("Gig", ["concert"])

        with pytest.raises(AlreadyExistsError, match="Event 'gig' already exists"):
            catalog_service.add_event("gig", ["comedy"])

    @pytest.mark.unit
    def test_category_name_collides_with_user(self, user_service, catalog_service):
        user_service.add_user("jazz")

        with pytest.raises(AlreadyExistsError):
            catalog_service.add_event("Gig", ["concert", "jazz"])

        assert not catalog_service.store.contains_vertex("Gig")
        assert not catalog_service.store.contains_vertex("concert")

    @pytest.mark.unit
    def test_event_cannot_be_own_category(self, catalog_service):
        with pytest.raises(InvalidOperationError):
            catalog_service.add_event("Jazz", ["jazz"])

    @pytest.mark.unit
    def test_duplicate_category(self, catalog_service):
        catalog_service.add_category("comedy")

        with pytest.raises(AlreadyExistsError):
            catalog_service.add_category("Comedy")

    @pytest.mark.unit
    def test_remove_event_strips_attendance(self, seeded, catalog_service, user_service, context):
        catalog_service.remove_event("mads comedy night")

        assert [e.id for e in user_service.get_attended_events("C")] == ["PythonWorkshop", "AI Bootcamp"]
        assert context.store.get_vertex("C").attended_events == ["PythonWorkshop", "AI Bootcamp"]
        assert "Mads Comedy Night" not in [e.id for e in catalog_service.events_in_category("comedy")]

    @pytest.mark.unit
    def test_remove_category_untags_events(self, seeded, catalog_service):
        catalog_service.remove_category("Theatre")

        assert catalog_service.get_event("ComedyClash").categories == ["comedy"]
        assert catalog_service.get_event("VarietyCharityConcert").categories == ["charity", "concert"]

    @pytest.mark.unit
    def test_remove_missing_event(self, catalog_service):
        with pytest.raises(NotFoundError):
            catalog_service.remove_event("ghost")


class TestGraphService:
    """Tests for whole-graph operations."""

    @pytest.mark.unit
    def test_adjacency_view(self, catalog_service, user_service, graph_service):
        catalog_service.add_event("Gig", ["concert"])
        user_service.add_user("Alice")
        user_service.record_attendance("Alice", "Gig", 5)

        assert graph_service.adjacency_view() == {
            "Gig": ["concert"],
            "concert": ["Gig"],
            "Alice": ["Gig"],
        }

    @pytest.mark.unit
    def test_seed_defaults(self, seeded, graph_service):
        stats = graph_service.stats()

        assert stats["vertices_by_type"] == {"User": 3, "Event": 8, "Category": 5}
        assert stats["edges_by_type"]["ATTENDED"] == 6
        assert stats["edges_by_type"]["IN_CATEGORY"] == stats["edges_by_type"]["HAS_EVENT"] == 14

    @pytest.mark.unit
    def test_seed_requires_empty_graph(self, seeded, graph_service):
        with pytest.raises(InvalidOperationError):
            graph_service.seed_defaults()

    @pytest.mark.unit
    def test_reset(self, seeded, graph_service, persistence):
        graph_service.reset()

        assert graph_service.is_empty()
        assert len(persistence.load()) == 0
