"""Immutable registry of entity schemas."""

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from graphgate.core.errors import UnknownEntityTypeError, UnknownRelationshipError
from graphgate.features.graph.schemas.attributes import (
    AttributeKind,
    AttributeSpec,
    Direction,
    RelationshipSpec,
)

# Labels and property names are rendered into query text, so they must be
# plain identifiers.
NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_name(name: str) -> str:
    if not NAME_PATTERN.match(name):
        raise ValueError(f"Invalid graph name {name!r}")
    return name


@dataclass(frozen=True)
class EntitySchema:
    """Declarative description of one entity type."""

    name: str
    attributes: Mapping[str, AttributeSpec]
    relationships: Mapping[str, RelationshipSpec] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        check_name(self.name)
        for attr in self.attributes:
            check_name(attr)
        for rel in self.relationships.values():
            check_name(rel.label)
            for prop in rel.properties:
                check_name(prop)
        primaries = [n for n, a in self.attributes.items() if a.primary]
        if len(primaries) != 1:
            raise ValueError(f"{self.name} must declare exactly one primary attribute")
        if self.attributes[primaries[0]].kind is not AttributeKind.IDENTIFIER:
            raise ValueError(f"{self.name} primary attribute must be an identifier")
        # freeze caller supplied dicts
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        object.__setattr__(
            self, "relationships", MappingProxyType(dict(self.relationships))
        )

    @property
    def label(self) -> str:
        return self.name

    @property
    def primary_key(self) -> str:
        return next(n for n, a in self.attributes.items() if a.primary)

    @property
    def writable_attributes(self) -> dict[str, AttributeSpec]:
        """Attributes a caller may supply on create."""
        return {n: a for n, a in self.attributes.items() if not a.readonly}

    @property
    def updatable_attributes(self) -> dict[str, AttributeSpec]:
        """Attributes a caller may change after creation."""
        return {
            n: a
            for n, a in self.attributes.items()
            if not a.readonly and not a.primary
        }

    def timestamp_attributes(self) -> list[str]:
        return [
            n
            for n, a in self.attributes.items()
            if a.kind is AttributeKind.TIMESTAMP and a.readonly
        ]

    def location_attribute(self) -> str | None:
        """First point attribute, used for spatial ranking."""
        for n, a in self.attributes.items():
            if a.kind is AttributeKind.POINT:
                return n
        return None


@dataclass(frozen=True)
class ResolvedRelationship:
    """A relationship seen from the ``from_type`` side of a request."""

    spec: RelationshipSpec
    from_schema: EntitySchema
    to_schema: EntitySchema
    # Direction of the stored edge relative to ``from_schema``
    direction: Direction

    @property
    def label(self) -> str:
        return self.spec.label


class SchemaRegistry:
    """Read-only lookup of entity schemas by type name."""

    def __init__(self, schemas: Iterable[EntitySchema]):
        registry: dict[str, EntitySchema] = {}
        for schema in schemas:
            if schema.name in registry:
                raise ValueError(f"Duplicate entity type {schema.name}")
            registry[schema.name] = schema
        self._schemas: Mapping[str, EntitySchema] = MappingProxyType(registry)

    def __contains__(self, entity_type: object) -> bool:
        return entity_type in self._schemas

    def __iter__(self) -> Iterator[EntitySchema]:
        return iter(self._schemas.values())

    def get_schema(self, entity_type: str) -> EntitySchema:
        """Return the schema for ``entity_type``.

        Raises:
            UnknownEntityTypeError: If the type is not declared
        """
        try:
            return self._schemas[entity_type]
        except KeyError:
            raise UnknownEntityTypeError(entity_type) from None

    def find_relationship(
        self, from_type: str, to_type: str, name: str
    ) -> ResolvedRelationship:
        """Resolve a relationship by declaration key or edge label.

        The relationship may be declared on ``from_type`` targeting ``to_type``
        or on ``to_type`` targeting ``from_type``; in the latter case the
        stored edge points the other way.
        """
        from_schema = self.get_schema(from_type)
        to_schema = self.get_schema(to_type)

        for key, spec in from_schema.relationships.items():
            if spec.target == to_type and name in (key, spec.label):
                return ResolvedRelationship(spec, from_schema, to_schema, spec.direction)

        for key, spec in to_schema.relationships.items():
            if spec.target == from_type and name in (key, spec.label):
                return ResolvedRelationship(
                    spec, from_schema, to_schema, spec.direction.reverse()
                )

        raise UnknownRelationshipError(from_type, to_type, name)
