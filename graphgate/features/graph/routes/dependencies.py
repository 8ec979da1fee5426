"""Dependency injection for the graph use cases."""

from fastapi import Depends

from graphgate.core.settings import Settings, get_settings
from graphgate.db.age import AgeGraphClient, get_graph_db_pool
from graphgate.features.graph.repositories import AgeGraphRepository, GraphRepository
from graphgate.features.graph.schemas import SchemaRegistry, get_registry
from graphgate.features.graph.usecases import (
    EntityUseCases,
    RecommendPromotionsUseCase,
    RelationshipUseCases,
)


async def get_graph_repository() -> GraphRepository:
    """Repository bound to the shared AGE connection pool."""
    pool = await get_graph_db_pool()
    settings = get_settings()
    return AgeGraphRepository(AgeGraphClient(pool, graph_name=settings.age_graph_name))


def get_schema_registry() -> SchemaRegistry:
    return get_registry()


def get_entity_use_cases(
    repository: GraphRepository = Depends(get_graph_repository),
    registry: SchemaRegistry = Depends(get_schema_registry),
    settings: Settings = Depends(get_settings),
) -> EntityUseCases:
    return EntityUseCases(repository, registry, settings)


def get_relationship_use_cases(
    repository: GraphRepository = Depends(get_graph_repository),
    registry: SchemaRegistry = Depends(get_schema_registry),
    settings: Settings = Depends(get_settings),
) -> RelationshipUseCases:
    return RelationshipUseCases(repository, registry, settings)


def get_recommend_promotions_use_case(
    repository: GraphRepository = Depends(get_graph_repository),
    registry: SchemaRegistry = Depends(get_schema_registry),
    settings: Settings = Depends(get_settings),
) -> RecommendPromotionsUseCase:
    return RecommendPromotionsUseCase(repository, registry, settings)
