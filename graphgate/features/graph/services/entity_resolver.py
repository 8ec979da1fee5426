"""Single-entity lookup by primary identifier."""

import asyncio

from graphgate.core.errors import NotFoundError
from graphgate.features.graph.repositories import GraphRepository, Properties
from graphgate.features.graph.schemas import EntitySchema, SchemaRegistry


class EntityResolver:
    """Resolves identifiers to entities, telling "absent" from store failure.

    ``NotFoundError`` means the store answered and the entity is not there;
    ``StoreError`` raised by the repository is left to propagate.
    """

    def __init__(self, repository: GraphRepository, registry: SchemaRegistry):
        self.repository: GraphRepository = repository
        self.registry: SchemaRegistry = registry

    async def resolve(self, entity_type: str, identifier: str) -> Properties:
        return await self.resolve_schema(self.registry.get_schema(entity_type), identifier)

    async def resolve_schema(self, schema: EntitySchema, identifier: str) -> Properties:
        entity = await self.repository.find_node(schema, identifier)
        if entity is None:
            raise NotFoundError(schema.name, identifier)
        return entity

    async def resolve_pair(
        self,
        from_schema: EntitySchema,
        from_id: str,
        to_schema: EntitySchema,
        to_id: str,
    ) -> tuple[Properties, Properties]:
        """Resolve both endpoints concurrently.

        The first failure cancels the other lookup and is raised as is.
        """
        try:
            async with asyncio.TaskGroup() as group:
                from_task = group.create_task(self.resolve_schema(from_schema, from_id))
                to_task = group.create_task(self.resolve_schema(to_schema, to_id))
        except ExceptionGroup as e:
            raise e.exceptions[0] from None
        return from_task.result(), to_task.result()
