"""Configuration module for the event graph recommender."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_GRAPH_FILE = Path(__file__).parent.parent / "data" / "event_graph.json"


@dataclass
class StorageConfig:
    """Snapshot storage settings."""
    graph_file: Path = field(default_factory=lambda: Path(os.getenv("EVENT_GRAPH_FILE", str(DEFAULT_GRAPH_FILE))))

    # Load the demo users/events/categories when starting from an empty graph
    seed_defaults: bool = field(default_factory=lambda: os.getenv("SEED_DEFAULT_DATA", "true").lower() == "true")


@dataclass
class RecommendationConfig:
    """Traversal settings."""
    max_depth: int = field(default_factory=lambda: int(os.getenv("RECOMMENDATION_MAX_DEPTH", "6")))

    # Lowest rating on a user->event edge that still counts as a recommendation
    min_rating: float = field(default_factory=lambda: float(os.getenv("RECOMMENDATION_MIN_RATING", "3")))


@dataclass
class ApiConfig:
    """REST server settings."""
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))


@dataclass
class Config:
    """Main configuration container."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    recommendation: RecommendationConfig = field(default_factory=RecommendationConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
