"""Graph use cases."""

from .entity_usecases import EntityUseCases
from .recommendation_usecase import RecommendPromotionsUseCase
from .relationship_usecases import RelationshipUseCases

__all__ = [
    "EntityUseCases",
    "RelationshipUseCases",
    "RecommendPromotionsUseCase",
]
