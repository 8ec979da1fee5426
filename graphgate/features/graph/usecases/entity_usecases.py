"""Generic CRUD use cases parameterised by entity type."""

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from graphgate.core.errors import ConflictError, NotFoundError, ValidationError
from graphgate.core.settings import Settings
from graphgate.features.graph.dtos import RemoveEntityResponse
from graphgate.features.graph.repositories import GraphRepository, Properties
from graphgate.features.graph.schemas import AttributeKind, EntitySchema, SchemaRegistry
from graphgate.features.graph.schemas.attributes import now_iso
from graphgate.features.graph.services import EntityResolver
from graphgate.features.graph.validation import (
    identifier_fields,
    parse_page,
    validate,
)

logger = logging.getLogger(__name__)


def _later_than(previous: str | None) -> str:
    """Now, nudged past ``previous`` when the clock has not moved on."""
    stamp = now_iso()
    if previous is None:
        return stamp
    try:
        before = datetime.fromisoformat(previous)
    except ValueError:
        return stamp
    current = datetime.fromisoformat(stamp)
    if current <= before:
        current = before + timedelta(microseconds=1)
    return current.isoformat()


class EntityUseCases:
    """List, find, create, update and remove for any registered entity type."""

    def __init__(
        self,
        repository: GraphRepository,
        registry: SchemaRegistry,
        settings: Settings,
    ):
        """Initialize the use cases with dependencies.

        Args:
            repository: Repository for graph database operations
            registry: Entity schemas
            settings: Paging defaults
        """
        self.repository: GraphRepository = repository
        self.registry: SchemaRegistry = registry
        self.settings: Settings = settings
        self.resolver: EntityResolver = EntityResolver(repository, registry)

    def _identifier(self, schema: EntitySchema, payload: Any) -> str:
        validated = validate(payload, identifier_fields(schema.primary_key))
        if validated.errors:
            raise ValidationError(validated.errors)
        return validated.properties[schema.primary_key]

    async def _check_unique(
        self, schema: EntitySchema, payload: Mapping[str, Any], properties: Properties
    ) -> None:
        """Reject caller-supplied values of ``unique`` attributes already in use.

        Generated defaults are not checked.
        """
        for name, spec in schema.attributes.items():
            if not spec.unique or payload.get(name) is None or name not in properties:
                continue
            value = properties[name]
            if name == schema.primary_key:
                existing = await self.repository.find_node(schema, value)
            else:
                matches = await self.repository.list_nodes(
                    schema, {name: value}, order_by=name, descending=False, skip=0, limit=1
                )
                existing = matches[0] if matches else None
            if existing is not None:
                raise ConflictError(
                    f"'{schema.name}' with {name} '{value}' already exists"
                )

    async def list_entities(self, entity_type: str, payload: Any) -> list[Properties]:
        """Ordered page of entities.

        Payload keys: ``filters`` (equality on declared attributes), ``order``,
        ``sort``, ``limit`` and ``page``. A page past the end is empty.
        """
        schema = self.registry.get_schema(entity_type)
        page, errors = parse_page(
            payload,
            default_limit=self.settings.default_page_size,
            max_limit=self.settings.max_page_size,
        )
        if page is None:
            raise ValidationError(errors)

        order_by = page.order or schema.primary_key
        if order_by not in schema.attributes:
            raise ValidationError.single("order", f"Unknown attribute '{order_by}'")

        raw_filters = payload.get("filters") or {}
        if not isinstance(raw_filters, dict):
            raise ValidationError.single("filters", "must be an object")
        filterable = {
            name: spec
            for name, spec in schema.attributes.items()
            if spec.kind is not AttributeKind.POINT
        }
        unknown = sorted(set(raw_filters) - set(filterable))
        if unknown:
            raise ValidationError(
                [{f"filters.{name}": "is not a filterable attribute"} for name in unknown]
            )
        filters = validate(raw_filters, filterable, apply_defaults=False, partial=True)
        if filters.errors:
            raise ValidationError(
                [{f"filters.{k}": v for k, v in e.items()} for e in filters.errors]
            )

        return await self.repository.list_nodes(
            schema,
            filters.properties,
            order_by=order_by,
            descending=page.descending,
            skip=page.skip,
            limit=page.limit,
        )

    async def find_entity(self, entity_type: str, payload: Any) -> Properties:
        schema = self.registry.get_schema(entity_type)
        identifier = self._identifier(schema, payload)
        return await self.resolver.resolve_schema(schema, identifier)

    async def create_entity(self, entity_type: str, payload: Any) -> Properties:
        """Create an entity from the writable attributes of ``payload``.

        The identifier is generated when absent and both timestamps get the
        same creation instant.
        """
        schema = self.registry.get_schema(entity_type)
        validated = validate(payload, schema.writable_attributes)
        if validated.errors:
            raise ValidationError(validated.errors)

        properties = validated.properties
        await self._check_unique(schema, payload, properties)
        created = now_iso()
        for name in schema.timestamp_attributes():
            properties[name] = created

        entity = await self.repository.create_node(schema, properties)
        logger.info("Created %s %s", schema.name, entity.get(schema.primary_key))
        return entity

    async def update_entity(self, entity_type: str, payload: Any) -> Properties:
        """Apply the supplied attributes to an existing entity.

        Never creates. The identifier is immutable and ``updated_at`` is
        re-stamped strictly later than its previous value.
        """
        schema = self.registry.get_schema(entity_type)
        identifier = self._identifier(schema, payload)
        validated = validate(
            payload, schema.updatable_attributes, apply_defaults=False, partial=True
        )
        if validated.errors:
            raise ValidationError(validated.errors)

        current = await self.resolver.resolve_schema(schema, identifier)
        properties = validated.properties
        if "updated_at" in schema.attributes:
            properties["updated_at"] = _later_than(current.get("updated_at"))
        if not properties:
            return current

        entity = await self.repository.update_node(schema, identifier, properties)
        if entity is None:
            # removed between the lookup and the update
            raise NotFoundError(schema.name, identifier)
        logger.info("Updated %s %s", schema.name, identifier)
        return entity

    async def remove_entity(self, entity_type: str, payload: Any) -> RemoveEntityResponse:
        """Delete an entity permanently, detaching its relationships."""
        schema = self.registry.get_schema(entity_type)
        identifier = self._identifier(schema, payload)
        await self.resolver.resolve_schema(schema, identifier)

        if not await self.repository.delete_node(schema, identifier):
            raise NotFoundError(schema.name, identifier)
        logger.info("Removed %s %s", schema.name, identifier)
        return RemoveEntityResponse(
            message=f"'{schema.name}' with uuid : '{identifier}' was removed",
            uuid=identifier,
        )
