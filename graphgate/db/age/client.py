"""openCypher execution through the AGE ``cypher()`` SQL function."""

import asyncio
import json
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, cast

import asyncpg

from graphgate.core.errors import StoreError
from graphgate.db.base import GraphStoreClient

logger = logging.getLogger(__name__)

_AGTYPE_ANNOTATION = re.compile(r"::(vertex|edge|path|numeric)")
_COLUMN = re.compile(r"^[a-z_][a-z0-9_]*$")


def _strip_annotations(value: str) -> str:
    """Drop ``::vertex``-style type suffixes that sit outside string literals."""
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    while i < len(value):
        char = value[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == ":" and (match := _AGTYPE_ANNOTATION.match(value, i)):
            i = match.end()
            continue
        out.append(char)
        i += 1
    return "".join(out)


def parse_agtype(value: str | None) -> Any:
    """Decode an agtype text value into plain Python data.

    Vertices and edges come back as maps with ``id``, ``label`` and
    ``properties`` keys. Text inside string values is left untouched.
    """
    if value is None:
        return None
    return json.loads(_strip_annotations(value))


class AgeGraphClient(GraphStoreClient):
    """Graph store client backed by PostgreSQL with Apache AGE."""

    pool: asyncpg.Pool
    graph_name: str

    def __init__(self, pool: asyncpg.Pool, graph_name: str):
        """Initialize the client with a connection pool and graph name."""
        if not graph_name or not _COLUMN.match(graph_name.lower()):
            raise ValueError("graph_name must be a plain identifier")
        self.pool = pool
        self.graph_name = graph_name

    def _wrap(self, query: str, columns: Sequence[str], with_params: bool) -> str:
        if "$$" in query:
            raise ValueError("Cypher text must not contain '$$'")
        for column in columns:
            if not _COLUMN.match(column):
                raise ValueError(f"Invalid result column {column!r}")
        as_clause = ", ".join(f"{c} agtype" for c in columns)
        params_arg = ", $1" if with_params else ""
        return (
            f"SELECT * FROM cypher('{self.graph_name}', $${query}$${params_arg}) "
            f"AS ({as_clause});"
        )

    async def execute(
        self,
        query: str,
        parameters: Mapping[str, Any] | None = None,
        columns: Sequence[str] = ("result",),
    ) -> list[dict[str, Any]]:
        """Execute a Cypher query, passing caller values as an agtype map.

        Raises:
            StoreError: On connectivity, execution or decoding failure
        """
        sql = self._wrap(query, columns, with_params=bool(parameters))
        args: list[Any] = [dict(parameters)] if parameters else []
        logger.debug("cypher: %s", query.strip())

        try:
            async with self.pool.acquire() as conn:
                conn = cast(asyncpg.Connection, conn)
                async with conn.transaction():
                    records = await conn.fetch(sql, *args)
            return [
                {column: parse_agtype(record[column]) for column in columns}
                for record in records
            ]
        except (
            asyncpg.PostgresError,
            asyncpg.InterfaceError,
            OSError,
            asyncio.TimeoutError,
        ) as e:
            logger.exception("Graph query failed")
            raise StoreError("Graph query failed") from e
        except (json.JSONDecodeError, KeyError) as e:
            logger.exception("Could not decode graph query result")
            raise StoreError("Malformed graph query result") from e
