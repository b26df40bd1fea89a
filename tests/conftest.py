"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Graph store and persistence
- Services backed by a temporary snapshot file
- API clients
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["EVENT_GRAPH_FILE"] = str(Path(tempfile.mkdtemp(prefix="eventgraph-test-")) / "event_graph.json")
os.environ["SEED_DEFAULT_DATA"] = "false"

from eventgraph.config import Config, StorageConfig, RecommendationConfig
from eventgraph.graph import GraphStore, JsonGraphPersistence
from eventgraph.services import ServiceContext, create_services


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def temp_data_dir() -> Generator[Path, None, None]:
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def graph_file(temp_data_dir) -> Path:
    """Path for a graph snapshot (not created yet)."""
    return temp_data_dir / "event_graph.json"


@pytest.fixture
def test_config(graph_file) -> Config:
    """Configuration pointing at a temporary snapshot, no seeding."""
    return Config(
        storage=StorageConfig(graph_file=graph_file, seed_defaults=False),
        recommendation=RecommendationConfig(max_depth=6, min_rating=3.0)
    )


# =============================================================================
# Graph Fixtures
# =============================================================================

@pytest.fixture
def store() -> GraphStore:
    """Empty in-memory graph store."""
    return GraphStore()


@pytest.fixture
def persistence(graph_file) -> JsonGraphPersistence:
    """JSON persistence on a temporary file."""
    return JsonGraphPersistence(graph_file)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def context(test_config, persistence) -> ServiceContext:
    """Service context writing snapshots to a temporary file."""
    return ServiceContext.create(config=test_config, persistence=persistence)


@pytest.fixture
def services(context):
    """Tuple of (context, users, catalog, recommendations, graph)."""
    return create_services(context)


@pytest.fixture
def user_service(services):
    return services[1]


@pytest.fixture
def catalog_service(services):
    return services[2]


@pytest.fixture
def recommendation_service(services):
    return services[3]


@pytest.fixture
def graph_service(services):
    return services[4]


@pytest.fixture
def seeded(services):
    """Services with the demo data loaded."""
    services[4].seed_defaults()
    return services


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_services(context):
    """API services container around the test context."""
    from api.deps import build_services
    return build_services(context)


@pytest.fixture
def api_app():
    """Create FastAPI app for testing."""
    from api.main import app
    return app


@pytest.fixture
def api_client(api_app, api_services) -> Generator[TestClient, None, None]:
    """Synchronous test client wired to the test services."""
    with patch("api.deps.get_services", return_value=api_services):
        yield TestClient(api_app)


@pytest.fixture
def seeded_api_client(api_client, api_services) -> TestClient:
    """API client with the demo data loaded."""
    api_services.graph.seed_defaults()
    return api_client


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
