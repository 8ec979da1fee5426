"""Apache AGE implementation of the graph repository protocol."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from typing_extensions import override

from graphgate.core.errors import StoreError
from graphgate.db.base import GraphStoreClient
from graphgate.features.graph.repositories import cypher
from graphgate.features.graph.repositories.cypher import CypherQuery, Hop
from graphgate.features.graph.repositories.protocols import (
    GraphRepository,
    Properties,
    RankingCandidate,
)
from graphgate.features.graph.schemas import Direction, EntitySchema

logger = logging.getLogger(__name__)


def _properties(element: Any) -> Properties:
    """Extract the property map of an AGE vertex or edge."""
    if not isinstance(element, Mapping) or "properties" not in element:
        raise StoreError("Expected a vertex or edge in the query result")
    return dict(element["properties"])


class AgeGraphRepository(GraphRepository):
    """Graph repository that renders openCypher for Apache AGE."""

    def __init__(self, client: GraphStoreClient):
        """Initialize the repository with a graph store client."""
        self.client: GraphStoreClient = client

    async def _run(self, query: CypherQuery) -> list[dict[str, Any]]:
        return await self.client.execute(query.text, query.parameters, query.columns)

    async def _single_count(self, query: CypherQuery) -> int:
        rows = await self._run(query)
        if not rows:
            return 0
        value = rows[0][query.columns[0]]
        return int(value or 0)

    @override
    async def find_node(
        self, schema: EntitySchema, identifier: str
    ) -> Properties | None:
        rows = await self._run(cypher.match_node(schema, identifier))
        if not rows:
            return None
        return _properties(rows[0]["n"])

    @override
    async def list_nodes(
        self,
        schema: EntitySchema,
        filters: Mapping[str, Any],
        order_by: str,
        descending: bool,
        skip: int,
        limit: int,
    ) -> list[Properties]:
        query = cypher.list_nodes(schema, filters, order_by, descending, skip, limit)
        return [_properties(row["n"]) for row in await self._run(query)]

    @override
    async def create_node(
        self, schema: EntitySchema, properties: Mapping[str, Any]
    ) -> Properties:
        rows = await self._run(cypher.create_node(schema, properties))
        if not rows:
            raise StoreError(f"Failed to create {schema.name}, the query returned no results.")
        return _properties(rows[0]["n"])

    @override
    async def update_node(
        self, schema: EntitySchema, identifier: str, properties: Mapping[str, Any]
    ) -> Properties | None:
        rows = await self._run(cypher.update_node(schema, identifier, properties))
        if not rows:
            return None
        return _properties(rows[0]["n"])

    @override
    async def delete_node(self, schema: EntitySchema, identifier: str) -> bool:
        return await self._single_count(cypher.delete_node(schema, identifier)) > 0

    @override
    async def find_edges(
        self,
        from_schema: EntitySchema,
        label: str,
        direction: Direction,
        to_schema: EntitySchema,
        from_id: str,
        to_id: str,
    ) -> list[Properties]:
        query = cypher.find_edges(from_schema, label, direction, to_schema, from_id, to_id)
        return [_properties(row["r"]) for row in await self._run(query)]

    @override
    async def create_edge(
        self,
        from_schema: EntitySchema,
        label: str,
        direction: Direction,
        to_schema: EntitySchema,
        from_id: str,
        to_id: str,
        properties: Mapping[str, Any],
    ) -> Properties:
        query = cypher.create_edge(
            from_schema, label, direction, to_schema, from_id, to_id, properties
        )
        rows = await self._run(query)
        if not rows:
            raise StoreError(f"Failed to create {label}, the query returned no results.")
        return _properties(rows[0]["r"])

    @override
    async def delete_edges(
        self,
        from_schema: EntitySchema,
        label: str,
        direction: Direction,
        to_schema: EntitySchema,
        from_id: str,
        to_id: str,
    ) -> int:
        query = cypher.delete_edges(
            from_schema, label, direction, to_schema, from_id, to_id
        )
        return await self._single_count(query)

    @override
    async def list_neighbours(
        self,
        from_schema: EntitySchema,
        from_id: str,
        label: str,
        direction: Direction,
        to_schema: EntitySchema,
        descending: bool,
        skip: int,
        limit: int,
    ) -> list[Properties]:
        query = cypher.list_neighbours(
            from_schema, from_id, label, direction, to_schema, descending, skip, limit
        )
        return [_properties(row["t"]) for row in await self._run(query)]

    @override
    async def collect_path_ids(
        self, start: EntitySchema, identifier: str, hops: Sequence[Hop], key: str
    ) -> set[str]:
        rows = await self._run(cypher.collect_path_ids(start, identifier, hops, key))
        if not rows:
            return set()
        return {value for value in rows[0]["ids"] or [] if value is not None}

    @override
    async def fetch_ranking_candidates(
        self,
        candidate: EntitySchema,
        category_hop: Hop,
        promoter_hop: Hop,
        category_key: str,
        promoter_key: str,
        location_key: str,
        category_filter: Sequence[str],
    ) -> list[RankingCandidate]:
        query = cypher.ranking_candidates(
            candidate,
            category_hop,
            promoter_hop,
            category_key,
            promoter_key,
            location_key,
            category_filter,
        )
        candidates: list[RankingCandidate] = []
        for row in await self._run(query):
            candidates.append(
                {
                    "node": _properties(row["promotion"]),
                    "category_ids": [c for c in row["categories"] or [] if c is not None],
                    "promoter_ids": [m for m in row["promoters"] or [] if m is not None],
                    "promoter_locations": [
                        loc for loc in row["locations"] or [] if isinstance(loc, Mapping)
                    ],
                }
            )
        logger.debug("Fetched %d %s ranking candidates", len(candidates), candidate.name)
        return candidates
