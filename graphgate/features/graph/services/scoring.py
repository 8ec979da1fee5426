"""Similarity and spatial signals for recommendation ranking."""

import math
from collections.abc import Iterable, Mapping, Set

from graphgate.core.settings import ZeroDistancePolicy

SIGNAL_COUNT = 4


def jaccard(a: Set[str], b: Set[str]) -> float:
    """``|A & B| / |A | B|``, defined as 0 when both sets are empty."""
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def distance(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """Cartesian distance between two ``{x, y}`` points."""
    return math.hypot(a["x"] - b["x"], a["y"] - b["y"])


def closest_distance(
    origin: Mapping[str, float], locations: Iterable[Mapping[str, float]]
) -> float | None:
    """Distance to the nearest location, or None when there is none."""
    distances = [distance(origin, loc) for loc in locations]
    return min(distances) if distances else None


def proximity(
    dist: float | None, policy: ZeroDistancePolicy, min_distance: float
) -> float | None:
    """Reciprocal distance term.

    Returns 0 for an unknown distance and None when ``policy`` excludes a
    promoter closer than ``min_distance``.
    """
    if dist is None:
        return 0.0
    if dist < min_distance:
        if policy is ZeroDistancePolicy.EXCLUDE:
            return None
        dist = min_distance
    return 1.0 / dist


def composite_score(
    viewed_similarity: float,
    interest_similarity: float,
    bookmark_similarity: float,
    proximity_term: float,
) -> float:
    """Equal-weight mean of the three similarities and the proximity term."""
    return (
        viewed_similarity + interest_similarity + bookmark_similarity + proximity_term
    ) / SIGNAL_COUNT
