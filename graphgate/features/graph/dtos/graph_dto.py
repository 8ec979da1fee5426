"""Response DTOs for the graph dispatchers.

Entities themselves are returned as plain property maps since their shape
depends on the schema.
"""

from typing import Any

from pydantic import BaseModel, Field


class RemoveEntityResponse(BaseModel):
    """Confirmation of an entity removal."""

    message: str = Field(..., description="Human readable confirmation")
    uuid: str = Field(..., description="Identifier of the removed entity")


class AddRelationshipResponse(BaseModel):
    """Identifier of the relationship that was created or merged."""

    relationship_uuid: str | None = Field(
        default=None,
        description="Edge identifier, null when the edge declares none",
    )
    created: bool = Field(
        default=True, description="False when an existing edge was reused"
    )


class RemoveRelationshipResponse(BaseModel):
    """How many edges a removal deleted."""

    removed: int = Field(..., ge=0, description="Number of deleted edges")
    message: str = Field(..., description="Human readable confirmation")


class ScoredEntity(BaseModel):
    """A ranked entity with its composite score and promoter distance."""

    entity: dict[str, Any] = Field(..., description="Entity properties")
    score: float = Field(..., description="Composite relevance score")
    distance: float | None = Field(
        default=None, description="Distance to the closest located promoter"
    )
    viewed_similarity: float = Field(default=0.0)
    interest_similarity: float = Field(default=0.0)
    bookmark_similarity: float = Field(default=0.0)

    def flatten(self) -> dict[str, Any]:
        """Entity properties annotated with ``score`` and ``distance``."""
        return {**self.entity, "score": self.score, "distance": self.distance}
