"""Pytest configuration and shared fixtures for all tests.

Dispatcher tests run against an in-memory repository; store-facing code is
tested with mocked asyncpg objects.
"""

import uuid

import pytest

from graphgate.core.settings import Settings
from graphgate.features.graph.schemas import SchemaRegistry, get_registry
from graphgate.features.graph.usecases import (
    EntityUseCases,
    RecommendPromotionsUseCase,
    RelationshipUseCases,
)
from tests.utils.memory_graph import InMemoryGraphRepository


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def test_settings() -> Settings:
    """Settings with defaults only, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def registry() -> SchemaRegistry:
    return get_registry()


@pytest.fixture
def repository() -> InMemoryGraphRepository:
    return InMemoryGraphRepository()


@pytest.fixture
def entity_use_cases(
    repository: InMemoryGraphRepository,
    registry: SchemaRegistry,
    test_settings: Settings,
) -> EntityUseCases:
    return EntityUseCases(repository, registry, test_settings)


@pytest.fixture
def relationship_use_cases(
    repository: InMemoryGraphRepository,
    registry: SchemaRegistry,
    test_settings: Settings,
) -> RelationshipUseCases:
    return RelationshipUseCases(repository, registry, test_settings)


@pytest.fixture
def recommend_use_case(
    repository: InMemoryGraphRepository,
    registry: SchemaRegistry,
    test_settings: Settings,
) -> RecommendPromotionsUseCase:
    return RecommendPromotionsUseCase(repository, registry, test_settings)
