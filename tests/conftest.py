import os

# Must be set before tangofeed.config is imported anywhere
os.environ.setdefault("TRACING_ENABLED", "false")

import pytest

from fakes import (
    NOW,
    InMemoryActivityStore,
    InMemoryGraphStore,
    InMemoryInteractionStore,
    InMemoryItemStore,
)
from tangofeed.config import Settings
from tangofeed.ranking.service import FeedAlgorithmService


@pytest.fixture
def config() -> Settings:
    return Settings(tracing_enabled=False)


@pytest.fixture
def item_store() -> InMemoryItemStore:
    return InMemoryItemStore()


@pytest.fixture
def graph_store() -> InMemoryGraphStore:
    return InMemoryGraphStore()


@pytest.fixture
def interaction_store() -> InMemoryInteractionStore:
    return InMemoryInteractionStore()


@pytest.fixture
def activity_store() -> InMemoryActivityStore:
    return InMemoryActivityStore()


@pytest.fixture
def service(config, item_store, graph_store, interaction_store, activity_store):
    return FeedAlgorithmService(
        items=item_store,
        graph=graph_store,
        interactions=interaction_store,
        activity=activity_store,
        config=config,
        clock=lambda: NOW,
    )
