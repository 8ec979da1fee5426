"""Protocol definition and types for graph repository operations."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypedDict

from graphgate.features.graph.repositories.cypher import Hop
from graphgate.features.graph.schemas import Direction, EntitySchema

Properties = dict[str, Any]


class RankingCandidate(TypedDict):
    """A candidate node with the id sets and locations used for scoring."""

    node: Properties
    category_ids: list[str]
    promoter_ids: list[str]
    promoter_locations: list[dict[str, float]]


class GraphRepository(Protocol):
    """Protocol for a schema-driven graph repository.

    Every method takes the schemas involved so that labels and keys come
    from declarations, never from callers. Implementations include
    AgeGraphRepository for Apache AGE.
    """

    async def find_node(
        self, schema: EntitySchema, identifier: str
    ) -> Properties | None:
        """Find a node by its primary identifier."""
        ...

    async def list_nodes(
        self,
        schema: EntitySchema,
        filters: Mapping[str, Any],
        order_by: str,
        descending: bool,
        skip: int,
        limit: int,
    ) -> list[Properties]:
        """List nodes matching equality filters, ordered and windowed."""
        ...

    async def create_node(
        self, schema: EntitySchema, properties: Mapping[str, Any]
    ) -> Properties:
        """Create a node and return its stored properties."""
        ...

    async def update_node(
        self, schema: EntitySchema, identifier: str, properties: Mapping[str, Any]
    ) -> Properties | None:
        """Set properties on an existing node. Returns None if it is gone."""
        ...

    async def delete_node(self, schema: EntitySchema, identifier: str) -> bool:
        """Delete a node with its incident edges. Returns True if deleted."""
        ...

    async def find_edges(
        self,
        from_schema: EntitySchema,
        label: str,
        direction: Direction,
        to_schema: EntitySchema,
        from_id: str,
        to_id: str,
    ) -> list[Properties]:
        """Properties of every ``label`` edge between the two nodes."""
        ...

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
        """Create an edge and return its stored properties."""
        ...

    async def delete_edges(
        self,
        from_schema: EntitySchema,
        label: str,
        direction: Direction,
        to_schema: EntitySchema,
        from_id: str,
        to_id: str,
    ) -> int:
        """Delete every ``label`` edge between the two nodes, returning the count."""
        ...

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
        """Distinct neighbours ordered by their primary identifier."""
        ...

    async def collect_path_ids(
        self, start: EntitySchema, identifier: str, hops: Sequence[Hop], key: str
    ) -> set[str]:
        """Distinct ``key`` values of the nodes reached along ``hops``."""
        ...

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
        """Candidate nodes with their category and promoter data."""
        ...
