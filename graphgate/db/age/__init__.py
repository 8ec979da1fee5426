"""Apache AGE (PostgreSQL) graph store client."""

from .client import AgeGraphClient, parse_agtype
from .connection import close_graph_db_pool, get_graph_db_pool

__all__ = ["AgeGraphClient", "parse_agtype", "get_graph_db_pool", "close_graph_db_pool"]
