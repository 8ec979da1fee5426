"""Tests for the openCypher builders."""

import pytest

from graphgate.features.graph.repositories import cypher
from graphgate.features.graph.repositories.cypher import Hop
from graphgate.features.graph.schemas import Direction, SchemaRegistry

HOSTILE = "x'}) DETACH DELETE n //"


class TestNodeQueries:
    def test_match_node_is_parameterised(self, registry: SchemaRegistry) -> None:
        query = cypher.match_node(registry.get_schema("Mall"), HOSTILE)

        assert query.text == "MATCH (n:Mall {uuid: $id}) RETURN n"
        assert query.parameters == {"id": HOSTILE}
        assert query.columns == ("n",)

    def test_list_nodes_with_filters(self, registry: SchemaRegistry) -> None:
        query = cypher.list_nodes(
            registry.get_schema("Store"),
            {"name": HOSTILE},
            order_by="name",
            descending=True,
            skip=20,
            limit=10,
        )

        assert query.text == (
            "MATCH (n:Store) WHERE n.name = $f_name "
            "RETURN n ORDER BY n.name DESC SKIP 20 LIMIT 10"
        )
        assert query.parameters == {"f_name": HOSTILE}

    def test_list_nodes_without_filters(self, registry: SchemaRegistry) -> None:
        query = cypher.list_nodes(
            registry.get_schema("Mall"), {}, "uuid", False, 0, 10
        )

        assert "WHERE" not in query.text
        assert query.text.endswith("ORDER BY n.uuid ASC SKIP 0 LIMIT 10")

    def test_far_pages_stay_within_int8_skip(self, registry: SchemaRegistry) -> None:
        skip = (10**18 - 1) * 100
        nodes = cypher.list_nodes(registry.get_schema("Mall"), {}, "uuid", False, skip, 100)
        neighbours = cypher.list_neighbours(
            registry.get_schema("Mall"),
            "m-1",
            "IS_IN",
            Direction.IN,
            registry.get_schema("Store"),
            descending=False,
            skip=skip,
            limit=100,
        )

        window = f"SKIP {2**63 - 1} LIMIT 100"
        assert nodes.text.endswith(window)
        assert neighbours.text.endswith(window)

    def test_list_nodes_rejects_unsafe_order(self, registry: SchemaRegistry) -> None:
        with pytest.raises(ValueError):
            cypher.list_nodes(registry.get_schema("Mall"), {}, "uuid; DROP", False, 0, 1)

    def test_create_node(self, registry: SchemaRegistry) -> None:
        query = cypher.create_node(
            registry.get_schema("Mall"),
            {"uuid": "u-1", "name": HOSTILE, "location": {"x": 1.0, "y": 2.0}},
        )

        assert query.text == (
            "CREATE (n:Mall {uuid: $p_uuid, name: $p_name, location: $p_location}) "
            "RETURN n"
        )
        assert query.parameters["p_name"] == HOSTILE
        assert query.parameters["p_location"] == {"x": 1.0, "y": 2.0}

    def test_update_node(self, registry: SchemaRegistry) -> None:
        query = cypher.update_node(
            registry.get_schema("Mall"), "u-1", {"name": "New", "updated_at": "t"}
        )

        assert query.text == (
            "MATCH (n:Mall {uuid: $id}) "
            "SET n.name = $p_name, n.updated_at = $p_updated_at RETURN n"
        )
        assert query.parameters == {"id": "u-1", "p_name": "New", "p_updated_at": "t"}

    def test_update_node_requires_properties(self, registry: SchemaRegistry) -> None:
        with pytest.raises(ValueError):
            cypher.update_node(registry.get_schema("Mall"), "u-1", {})

    def test_delete_node_detaches(self, registry: SchemaRegistry) -> None:
        query = cypher.delete_node(registry.get_schema("Mall"), "u-1")

        assert "DETACH DELETE n" in query.text
        assert query.parameters == {"id": "u-1"}


class TestEdgeQueries:
    def test_find_edges_outbound(self, registry: SchemaRegistry) -> None:
        query = cypher.find_edges(
            registry.get_schema("Store"),
            "IS_IN",
            Direction.OUT,
            registry.get_schema("Mall"),
            "s-1",
            "m-1",
        )

        assert query.text == (
            "MATCH (f:Store {uuid: $from_id})-[r:IS_IN]->(t:Mall {uuid: $to_id}) "
            "RETURN r"
        )
        assert query.parameters == {"from_id": "s-1", "to_id": "m-1"}

    def test_inbound_edges_point_back(self, registry: SchemaRegistry) -> None:
        query = cypher.delete_edges(
            registry.get_schema("Mall"),
            "IS_IN",
            Direction.IN,
            registry.get_schema("Store"),
            "m-1",
            "s-1",
        )

        assert "(f:Mall {uuid: $from_id})<-[r:IS_IN]-(t:Store {uuid: $to_id})" in query.text
        assert query.text.endswith("DELETE r WITH count(r) AS c RETURN c")

    def test_create_edge_properties_are_parameters(self, registry: SchemaRegistry) -> None:
        query = cypher.create_edge(
            registry.get_schema("Store"),
            "IS_IN",
            Direction.OUT,
            registry.get_schema("Mall"),
            "s-1",
            "m-1",
            {"uuid": "e-1", "created_at": "t"},
        )

        assert "CREATE (f)-[r:IS_IN {uuid: $e_uuid, created_at: $e_created_at}]->(t)" in (
            query.text
        )
        assert query.parameters == {
            "e_uuid": "e-1",
            "e_created_at": "t",
            "from_id": "s-1",
            "to_id": "m-1",
        }

    def test_list_neighbours_distinct_and_ordered(self, registry: SchemaRegistry) -> None:
        query = cypher.list_neighbours(
            registry.get_schema("Mall"),
            "m-1",
            "IS_IN",
            Direction.IN,
            registry.get_schema("Store"),
            descending=False,
            skip=10,
            limit=5,
        )

        assert query.text == (
            "MATCH (f:Mall {uuid: $from_id})<-[:IS_IN]-(t:Store) "
            "RETURN DISTINCT t ORDER BY t.uuid ASC SKIP 10 LIMIT 5"
        )

    def test_rejects_unsafe_label(self) -> None:
        with pytest.raises(ValueError):
            cypher.edge_pattern("IS_IN]->(x) DELETE x //", Direction.OUT)


class TestRankingQueries:
    def test_collect_path_ids_multi_hop(self, registry: SchemaRegistry) -> None:
        query = cypher.collect_path_ids(
            registry.get_schema("User"),
            "u-1",
            [
                Hop("VIEWED", Direction.OUT, "Promotion"),
                Hop("IN_CATEGORY", Direction.OUT, "Category"),
            ],
            key="uuid",
        )

        assert query.text == (
            "MATCH (s:User {uuid: $id})-[:VIEWED]->(:Promotion)"
            "-[:IN_CATEGORY]->(x:Category) RETURN collect(DISTINCT x.uuid)"
        )

    def test_collect_path_ids_untyped_target(self, registry: SchemaRegistry) -> None:
        query = cypher.collect_path_ids(
            registry.get_schema("User"), "u-1", [Hop("BOOKMARKED")], key="uuid"
        )

        assert "-[:BOOKMARKED]->(x) " in query.text

    def test_ranking_candidates_filter_is_parameter(self, registry: SchemaRegistry) -> None:
        query = cypher.ranking_candidates(
            registry.get_schema("Promotion"),
            Hop("IN_CATEGORY", Direction.OUT, "Category"),
            Hop("PROMOTED_BY", Direction.OUT),
            category_key="uuid",
            promoter_key="uuid",
            location_key="location",
            category_filter=["c-1", "c-2"],
        )

        assert "WHERE c.uuid IN $categories" in query.text
        assert "OPTIONAL MATCH (p)-[:PROMOTED_BY]->(m)" in query.text
        assert query.parameters == {"categories": ["c-1", "c-2"]}
        assert query.columns == ("promotion", "categories", "promoters", "locations")

    def test_ranking_candidates_without_filter(self, registry: SchemaRegistry) -> None:
        query = cypher.ranking_candidates(
            registry.get_schema("Promotion"),
            Hop("IN_CATEGORY", Direction.OUT, "Category"),
            Hop("PROMOTED_BY", Direction.OUT),
            "uuid",
            "uuid",
            "location",
            [],
        )

        assert "WHERE" not in query.text
        assert query.parameters == {}
