"""Schema registry: entity declarations loaded once per process."""

from functools import lru_cache

from .attributes import (
    AttributeKind,
    AttributeSpec,
    Direction,
    RelationshipSpec,
)
from .definitions import ENTITY_SCHEMAS
from .registry import EntitySchema, ResolvedRelationship, SchemaRegistry


@lru_cache
def get_registry() -> SchemaRegistry:
    """Process-wide registry of the declared entity types."""
    return SchemaRegistry(ENTITY_SCHEMAS)


__all__ = [
    "AttributeKind",
    "AttributeSpec",
    "Direction",
    "EntitySchema",
    "RelationshipSpec",
    "ResolvedRelationship",
    "SchemaRegistry",
    "get_registry",
]
