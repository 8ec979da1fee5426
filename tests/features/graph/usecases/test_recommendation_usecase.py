"""Tests for promotion recommendations."""

from types import SimpleNamespace

import pytest

from graphgate.core.errors import NotFoundError, ValidationError
from graphgate.core.settings import Settings, ZeroDistancePolicy
from graphgate.features.graph.schemas import SchemaRegistry
from graphgate.features.graph.usecases import RecommendPromotionsUseCase
from tests.conftest import new_id
from tests.utils.memory_graph import InMemoryGraphRepository

ORIGIN = {"x": 0.0, "y": 0.0}


@pytest.fixture
def world(repository: InMemoryGraphRepository) -> SimpleNamespace:
    """Two categories, a store 5 away, a mall 1 away and one promotion per place."""
    ids = SimpleNamespace(
        user=new_id(),
        food=new_id(),
        fashion=new_id(),
        store=new_id(),
        mall=new_id(),
        store_promo=new_id(),
        mall_promo=new_id(),
    )
    repository.add_node("User", uuid=ids.user, name="Ann")
    repository.add_node("Category", uuid=ids.food, name="Food")
    repository.add_node("Category", uuid=ids.fashion, name="Fashion")
    repository.add_node("Store", uuid=ids.store, name="Deli", location={"x": 3.0, "y": 4.0})
    repository.add_node("Mall", uuid=ids.mall, name="Plaza", location={"x": 0.0, "y": 1.0})
    repository.add_node("Promotion", uuid=ids.store_promo, name="Half price bagels")
    repository.add_node("Promotion", uuid=ids.mall_promo, name="Summer sale")

    repository.add_edge(("Promotion", ids.store_promo), "IN_CATEGORY", ("Category", ids.food))
    repository.add_edge(("Promotion", ids.store_promo), "PROMOTED_BY", ("Store", ids.store))
    repository.add_edge(("Promotion", ids.mall_promo), "IN_CATEGORY", ("Category", ids.fashion))
    repository.add_edge(("Promotion", ids.mall_promo), "PROMOTED_BY", ("Mall", ids.mall))
    return ids


def _request(ids: SimpleNamespace, **extra) -> dict:
    return {"uuid": ids.user, "location": dict(ORIGIN), **extra}


def _uuids(results: list[dict]) -> list[str]:
    return [r["uuid"] for r in results]


class TestRanking:
    @pytest.mark.asyncio
    async def test_without_history_proximity_decides(
        self, recommend_use_case: RecommendPromotionsUseCase, world: SimpleNamespace
    ) -> None:
        results = await recommend_use_case.execute(_request(world))

        assert _uuids(results) == [world.mall_promo, world.store_promo]
        mall_promo, store_promo = results
        assert mall_promo["distance"] == pytest.approx(1.0)
        assert mall_promo["score"] == pytest.approx(1.0 / 4)
        assert store_promo["distance"] == pytest.approx(5.0)
        assert store_promo["score"] == pytest.approx(0.2 / 4)
        assert store_promo["name"] == "Half price bagels"

    @pytest.mark.asyncio
    async def test_interest_lifts_matching_category(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        world: SimpleNamespace,
    ) -> None:
        repository.add_edge(("User", world.user), "INTERESTED_IN", ("Category", world.food))

        results = await recommend_use_case.execute(_request(world))

        assert _uuids(results) == [world.store_promo, world.mall_promo]
        assert results[0]["score"] == pytest.approx((1.0 + 0.2) / 4)

    @pytest.mark.asyncio
    async def test_viewed_categories_count(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        world: SimpleNamespace,
    ) -> None:
        repository.add_edge(("User", world.user), "VIEWED", ("Promotion", world.store_promo))

        results = await recommend_use_case.execute(_request(world))

        assert results[0]["uuid"] == world.store_promo
        assert results[0]["score"] == pytest.approx((1.0 + 0.2) / 4)

    @pytest.mark.asyncio
    async def test_bookmarked_promoter_counts(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        world: SimpleNamespace,
    ) -> None:
        repository.add_edge(("User", world.user), "BOOKMARKED", ("Store", world.store))

        results = await recommend_use_case.execute(_request(world))

        assert results[0]["uuid"] == world.store_promo
        assert results[0]["score"] == pytest.approx((1.0 + 0.2) / 4)

    @pytest.mark.asyncio
    async def test_category_filter(
        self, recommend_use_case: RecommendPromotionsUseCase, world: SimpleNamespace
    ) -> None:
        results = await recommend_use_case.execute(
            _request(world, categories=[world.food])
        )

        assert _uuids(results) == [world.store_promo]

    @pytest.mark.asyncio
    async def test_unpromoted_candidate_has_no_distance(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        world: SimpleNamespace,
    ) -> None:
        orphan = new_id()
        repository.add_node("Promotion", uuid=orphan, name="Orphan")
        repository.add_edge(("Promotion", orphan), "IN_CATEGORY", ("Category", world.food))

        results = await recommend_use_case.execute(_request(world))

        assert results[-1]["uuid"] == orphan
        assert results[-1]["distance"] is None
        assert results[-1]["score"] == 0.0

    @pytest.mark.asyncio
    async def test_uncategorised_promotions_are_not_candidates(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        world: SimpleNamespace,
    ) -> None:
        repository.add_node("Promotion", uuid=new_id(), name="Lonely")

        results = await recommend_use_case.execute(_request(world))

        assert len(results) == 2

    @pytest.mark.asyncio
    async def test_pagination_applies_after_ranking(
        self, recommend_use_case: RecommendPromotionsUseCase, world: SimpleNamespace
    ) -> None:
        second = await recommend_use_case.execute(_request(world, limit=1, page=2))
        third = await recommend_use_case.execute(_request(world, limit=1, page=3))

        assert _uuids(second) == [world.store_promo]
        assert third == []


class TestZeroDistance:
    @pytest.fixture
    def on_top_of_mall(self, world: SimpleNamespace) -> dict:
        # standing exactly at the mall
        return {"uuid": world.user, "location": {"x": 0, "y": 1}}

    @pytest.mark.asyncio
    async def test_clamped_by_default(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        world: SimpleNamespace,
        on_top_of_mall: dict,
        test_settings: Settings,
    ) -> None:
        results = await recommend_use_case.execute(on_top_of_mall)

        assert results[0]["uuid"] == world.mall_promo
        assert results[0]["distance"] == 0.0
        assert results[0]["score"] == pytest.approx(1.0 / test_settings.min_distance / 4)

    @pytest.mark.asyncio
    async def test_excluded_when_configured(
        self,
        repository: InMemoryGraphRepository,
        registry: SchemaRegistry,
        world: SimpleNamespace,
        on_top_of_mall: dict,
    ) -> None:
        settings = Settings(_env_file=None, zero_distance_policy=ZeroDistancePolicy.EXCLUDE)
        use_case = RecommendPromotionsUseCase(repository, registry, settings)

        results = await use_case.execute(on_top_of_mall)

        assert _uuids(results) == [world.store_promo]


class TestRequestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "location",
        ["1,2", {"x": 1}, {"x": "1", "y": 2}, None],
    )
    async def test_location(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        location,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await recommend_use_case.execute({"uuid": new_id(), "location": location})

        assert [list(e) for e in exc_info.value.errors] == [["location"]]
        assert repository.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "categories,message",
        [
            ("food", "Categories are invalid, expected an array"),
            (["food"], "'food' is not a valid uuid"),
        ],
    )
    async def test_categories(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        categories,
        message: str,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await recommend_use_case.execute(
                {"uuid": new_id(), "location": ORIGIN, "categories": categories}
            )

        assert exc_info.value.errors == [{"categories": message}]
        assert repository.calls == []

    @pytest.mark.asyncio
    async def test_unknown_user(
        self,
        recommend_use_case: RecommendPromotionsUseCase,
        repository: InMemoryGraphRepository,
        world: SimpleNamespace,
    ) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await recommend_use_case.execute({"uuid": new_id(), "location": ORIGIN})

        assert exc_info.value.entity_type == "User"
        assert "fetch_ranking_candidates" not in repository.calls
