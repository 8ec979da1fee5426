"""DTOs for graph dispatcher responses."""

from .graph_dto import (
    AddRelationshipResponse,
    RemoveEntityResponse,
    RemoveRelationshipResponse,
    ScoredEntity,
)

__all__ = [
    "AddRelationshipResponse",
    "RemoveEntityResponse",
    "RemoveRelationshipResponse",
    "ScoredEntity",
]
