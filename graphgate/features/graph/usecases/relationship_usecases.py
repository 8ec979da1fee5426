"""Generic relationship use cases between two entity types.

Every operation runs the same pipeline: validate the payload, resolve the
endpoint(s), run one graph operation, shape the response. A failure at any
stage ends the pipeline.
"""

import logging
from typing import Any

from graphgate.core.errors import ConflictError, ValidationError
from graphgate.core.settings import DuplicatePolicy, Settings
from graphgate.features.graph.dtos import (
    AddRelationshipResponse,
    RemoveRelationshipResponse,
)
from graphgate.features.graph.repositories import GraphRepository, Properties
from graphgate.features.graph.schemas import (
    Direction,
    ResolvedRelationship,
    SchemaRegistry,
)
from graphgate.features.graph.services import EntityResolver
from graphgate.features.graph.validation import (
    identifier_fields,
    parse_page,
    validate,
)

logger = logging.getLogger(__name__)

PAIR_FIELDS = identifier_fields("from_uuid", "to_uuid")


class RelationshipUseCases:
    """Create, inspect and remove typed, directed relationships."""

    def __init__(
        self,
        repository: GraphRepository,
        registry: SchemaRegistry,
        settings: Settings,
    ):
        self.repository: GraphRepository = repository
        self.registry: SchemaRegistry = registry
        self.settings: Settings = settings
        self.resolver: EntityResolver = EntityResolver(repository, registry)

    def _pair(self, payload: Any) -> tuple[str, str]:
        validated = validate(payload, PAIR_FIELDS)
        if validated.errors:
            raise ValidationError(validated.errors)
        return validated.properties["from_uuid"], validated.properties["to_uuid"]

    async def _resolve_endpoints(
        self, relationship: ResolvedRelationship, from_id: str, to_id: str
    ) -> None:
        await self.resolver.resolve_pair(
            relationship.from_schema, from_id, relationship.to_schema, to_id
        )

    async def add_relationship(
        self,
        from_type: str,
        to_type: str,
        relationship_name: str,
        payload: Any,
        on_duplicate: DuplicatePolicy | None = None,
    ) -> AddRelationshipResponse:
        """Relate two existing entities.

        With ``force`` set in the payload a new edge is always created.
        Otherwise an existing edge with the same label is rejected with
        ``ConflictError`` or reused, depending on ``on_duplicate`` (the
        configured policy when omitted).
        """
        relationship = self.registry.find_relationship(
            from_type, to_type, relationship_name
        )
        from_id, to_id = self._pair(payload)
        force = payload.get("force", False)
        if not isinstance(force, bool):
            raise ValidationError.single("force", "must be a boolean")
        policy = on_duplicate or self.settings.duplicate_relationship_policy

        await self._resolve_endpoints(relationship, from_id, to_id)

        key = relationship.spec.identifier_property
        if not force:
            existing = await self.repository.find_edges(
                relationship.from_schema,
                relationship.label,
                relationship.direction,
                relationship.to_schema,
                from_id,
                to_id,
            )
            if existing:
                if policy is DuplicatePolicy.REJECT:
                    raise ConflictError(
                        f"'{relationship.label}' already relates '{from_id}' to '{to_id}'"
                    )
                return AddRelationshipResponse(
                    relationship_uuid=existing[0].get(key) if key else None,
                    created=False,
                )

        edge = await self.repository.create_edge(
            relationship.from_schema,
            relationship.label,
            relationship.direction,
            relationship.to_schema,
            from_id,
            to_id,
            relationship.spec.default_properties(),
        )
        logger.info(
            "Related %s %s -[%s]- %s %s",
            from_type,
            from_id,
            relationship.label,
            to_type,
            to_id,
        )
        return AddRelationshipResponse(relationship_uuid=edge.get(key) if key else None)

    async def list_relationship_between(
        self, from_type: str, to_type: str, relationship_name: str, payload: Any
    ) -> list[Properties]:
        """Edges of the relationship between two entities; empty when unrelated."""
        relationship = self.registry.find_relationship(
            from_type, to_type, relationship_name
        )
        from_id, to_id = self._pair(payload)
        await self._resolve_endpoints(relationship, from_id, to_id)
        return await self.repository.find_edges(
            relationship.from_schema,
            relationship.label,
            relationship.direction,
            relationship.to_schema,
            from_id,
            to_id,
        )

    async def list_related(
        self,
        from_type: str,
        to_type: str,
        relationship_name: str,
        payload: Any,
        direction: Direction | None = None,
    ) -> list[Properties]:
        """Distinct ``to_type`` entities reached from ``uuid``, ordered by identifier.

        ``direction`` defaults to the way the relationship is declared; a
        ``direction`` key in the payload overrides both.
        """
        relationship = self.registry.find_relationship(
            from_type, to_type, relationship_name
        )
        from_schema = relationship.from_schema
        validated = validate(payload, identifier_fields(from_schema.primary_key))
        page, page_errors = parse_page(
            payload,
            default_limit=self.settings.default_page_size,
            max_limit=self.settings.max_page_size,
        )
        errors = validated.errors + [e for e in page_errors if e not in validated.errors]
        if isinstance(payload, dict) and payload.get("direction") is not None:
            try:
                direction = Direction.parse(str(payload["direction"]))
            except ValueError as e:
                errors.append({"direction": str(e)})
        if errors or page is None:
            raise ValidationError(errors)

        from_id = validated.properties[from_schema.primary_key]
        await self.resolver.resolve_schema(from_schema, from_id)

        return await self.repository.list_neighbours(
            from_schema,
            from_id,
            relationship.label,
            direction or relationship.direction,
            relationship.to_schema,
            descending=page.descending,
            skip=page.skip,
            limit=page.limit,
        )

    async def remove_relationship_between(
        self, from_type: str, to_type: str, relationship_name: str, payload: Any
    ) -> RemoveRelationshipResponse:
        """Delete every matching edge. Removing nothing is not an error."""
        relationship = self.registry.find_relationship(
            from_type, to_type, relationship_name
        )
        from_id, to_id = self._pair(payload)
        await self._resolve_endpoints(relationship, from_id, to_id)

        removed = await self.repository.delete_edges(
            relationship.from_schema,
            relationship.label,
            relationship.direction,
            relationship.to_schema,
            from_id,
            to_id,
        )
        logger.info("Removed %d %s edges", removed, relationship.label)
        return RemoveRelationshipResponse(
            removed=removed, message=f"Removed {removed} relationships!"
        )
