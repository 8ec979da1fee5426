"""Graph services package."""

from .entity_resolver import EntityResolver
from .scoring import closest_distance, composite_score, distance, jaccard, proximity

__all__ = [
    "EntityResolver",
    "closest_distance",
    "composite_score",
    "distance",
    "jaccard",
    "proximity",
]
