"""Repository protocols and result types."""

from .graph_repository import GraphRepository, Properties, RankingCandidate

__all__ = ["GraphRepository", "Properties", "RankingCandidate"]
