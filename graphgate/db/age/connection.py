"""PostgreSQL connection pool for AGE graph operations."""

import json
import logging

import asyncpg

from graphgate.core.settings import get_settings

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None


async def init_age_connection(conn: asyncpg.Connection) -> None:
    """Load AGE and register a text codec for ``agtype`` on a new connection."""
    _ = await conn.execute("LOAD 'age';")
    _ = await conn.execute("SET search_path = ag_catalog, '$user', public;")
    await conn.set_type_codec(
        "agtype",
        schema="ag_catalog",
        encoder=json.dumps,
        decoder=str,
        format="text",
    )


async def get_graph_db_pool() -> asyncpg.Pool:
    """Get the database connection pool as a dependency."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = await asyncpg.create_pool(
            user=settings.postgres_user,
            password=settings.postgres_password,
            host=settings.postgres_host,
            port=settings.postgres_port,
            database=settings.postgres_db,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            init=init_age_connection,
        )
        logger.info(
            "Graph pool opened on %s:%s/%s",
            settings.postgres_host,
            settings.postgres_port,
            settings.postgres_db,
        )

    return _pool


async def close_graph_db_pool() -> None:
    """Close the database connection pool."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Graph pool closed")
