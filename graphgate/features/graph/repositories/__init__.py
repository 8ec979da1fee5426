"""Graph repositories package."""

from .age_repository import AgeGraphRepository
from .cypher import CypherQuery, Hop
from .protocols import GraphRepository, Properties, RankingCandidate

__all__ = [
    # Graph implementation
    "AgeGraphRepository",
    # Protocol and types (from protocols/)
    "GraphRepository",
    "Properties",
    "RankingCandidate",
    # Query building
    "CypherQuery",
    "Hop",
]
