"""Use case ranking promotions for a user.

The score of a promotion is the mean of four signals:

* Jaccard similarity of the categories of promotions the user viewed and the
  promotion's categories,
* Jaccard similarity of the categories the user is interested in and the
  promotion's categories,
* Jaccard similarity of the places the user bookmarked and the promotion's
  promoters,
* the reciprocal distance from the requested point to the closest promoter.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from graphgate.core.errors import ValidationError
from graphgate.core.settings import Settings, ZeroDistancePolicy
from graphgate.features.graph.dtos import ScoredEntity
from graphgate.features.graph.repositories import GraphRepository, Hop, RankingCandidate
from graphgate.features.graph.schemas import (
    AttributeKind,
    AttributeSpec,
    Direction,
    SchemaRegistry,
)
from graphgate.features.graph.services import (
    EntityResolver,
    closest_distance,
    composite_score,
    jaccard,
    proximity,
)
from graphgate.features.graph.validation import REQUIRED_IDENTIFIER, parse_page, validate

logger = logging.getLogger(__name__)

REQUEST_FIELDS = {
    "uuid": REQUIRED_IDENTIFIER,
    "location": AttributeSpec(kind=AttributeKind.POINT, required=True),
}


@dataclass(frozen=True)
class RankingProfile:
    """Which graph paths feed each ranking signal."""

    user_type: str
    candidate_type: str
    interest_path: tuple[Hop, ...]
    viewed_path: tuple[Hop, ...]
    bookmark_path: tuple[Hop, ...]
    category_hop: Hop
    promoter_hop: Hop
    key: str = "uuid"
    location_key: str = "location"


PROMOTION_PROFILE = RankingProfile(
    user_type="User",
    candidate_type="Promotion",
    interest_path=(Hop("INTERESTED_IN", Direction.OUT, "Category"),),
    viewed_path=(
        Hop("VIEWED", Direction.OUT, "Promotion"),
        Hop("IN_CATEGORY", Direction.OUT, "Category"),
    ),
    bookmark_path=(Hop("BOOKMARKED", Direction.OUT),),
    category_hop=Hop("IN_CATEGORY", Direction.OUT, "Category"),
    promoter_hop=Hop("PROMOTED_BY", Direction.OUT),
)


def parse_categories(raw: Any) -> tuple[list[str], list[dict[str, str]]]:
    """Absent means no filter; otherwise a list of identifiers is required."""
    if raw is None:
        return [], []
    if not isinstance(raw, list):
        return [], [{"categories": "Categories are invalid, expected an array"}]
    categories: list[str] = []
    for value in raw:
        try:
            categories.append(str(UUID(str(value))))
        except ValueError:
            return [], [{"categories": f"'{value}' is not a valid uuid"}]
    return categories, []


@dataclass(frozen=True)
class UserSignals:
    interests: set[str]
    viewed: set[str]
    bookmarked: set[str]


class RecommendPromotionsUseCase:
    """Ranks candidates for a user by behaviour similarity and proximity."""

    def __init__(
        self,
        repository: GraphRepository,
        registry: SchemaRegistry,
        settings: Settings,
        profile: RankingProfile = PROMOTION_PROFILE,
    ):
        self.repository: GraphRepository = repository
        self.registry: SchemaRegistry = registry
        self.settings: Settings = settings
        self.profile: RankingProfile = profile
        self.resolver: EntityResolver = EntityResolver(repository, registry)

    async def _signals(self, user_id: str) -> UserSignals:
        user_schema = self.registry.get_schema(self.profile.user_type)
        key = self.profile.key
        interests, viewed, bookmarked = await asyncio.gather(
            self.repository.collect_path_ids(
                user_schema, user_id, self.profile.interest_path, key
            ),
            self.repository.collect_path_ids(
                user_schema, user_id, self.profile.viewed_path, key
            ),
            self.repository.collect_path_ids(
                user_schema, user_id, self.profile.bookmark_path, key
            ),
        )
        return UserSignals(interests=interests, viewed=viewed, bookmarked=bookmarked)

    def score(
        self,
        candidate: RankingCandidate,
        signals: UserSignals,
        origin: dict[str, float],
    ) -> ScoredEntity | None:
        """Score one candidate; None when the distance policy excludes it."""
        categories = set(candidate["category_ids"])
        promoters = set(candidate["promoter_ids"])
        dist = closest_distance(origin, candidate["promoter_locations"])
        proximity_term = proximity(
            dist, self.settings.zero_distance_policy, self.settings.min_distance
        )
        if proximity_term is None:
            return None

        viewed = jaccard(signals.viewed, categories)
        interest = jaccard(signals.interests, categories)
        bookmark = jaccard(signals.bookmarked, promoters)
        return ScoredEntity(
            entity=candidate["node"],
            score=composite_score(viewed, interest, bookmark, proximity_term),
            distance=dist,
            viewed_similarity=viewed,
            interest_similarity=interest,
            bookmark_similarity=bookmark,
        )

    def rank(
        self,
        candidates: Sequence[RankingCandidate],
        signals: UserSignals,
        origin: dict[str, float],
    ) -> list[ScoredEntity]:
        """Score descending; ties keep identifier order."""
        key = self.profile.key
        scored = [
            s
            for s in (self.score(c, signals, origin) for c in candidates)
            if s is not None
        ]
        scored.sort(key=lambda s: str(s.entity.get(key, "")))
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored

    async def execute(self, payload: Any) -> list[dict[str, Any]]:
        """Recommended promotions for ``uuid`` near ``location``.

        Payload keys: ``uuid``, ``location`` (``{x, y}``), optional
        ``categories`` (array of identifiers), ``limit`` and ``page``.
        """
        validated = validate(payload, REQUEST_FIELDS)
        page, page_errors = parse_page(
            payload,
            default_limit=self.settings.default_page_size,
            max_limit=self.settings.max_page_size,
        )
        errors = validated.errors + [e for e in page_errors if e not in validated.errors]
        categories: list[str] = []
        if isinstance(payload, dict):
            categories, category_errors = parse_categories(payload.get("categories"))
            errors += category_errors
        if errors or page is None:
            raise ValidationError(errors)

        user_id = validated.properties["uuid"]
        origin = validated.properties["location"]
        await self.resolver.resolve(self.profile.user_type, user_id)

        profile = self.profile
        signals, candidates = await asyncio.gather(
            self._signals(user_id),
            self.repository.fetch_ranking_candidates(
                self.registry.get_schema(profile.candidate_type),
                profile.category_hop,
                profile.promoter_hop,
                category_key=profile.key,
                promoter_key=profile.key,
                location_key=profile.location_key,
                category_filter=categories,
            ),
        )

        ranked = self.rank(candidates, signals, origin)
        logger.debug(
            "Ranked %d %s candidates for %s (policy=%s)",
            len(ranked),
            profile.candidate_type,
            user_id,
            ZeroDistancePolicy(self.settings.zero_distance_policy).value,
        )
        window = ranked[page.skip : page.skip + page.limit]
        return [s.flatten() for s in window]
