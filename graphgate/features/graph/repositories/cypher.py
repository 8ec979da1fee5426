"""Parameterised openCypher builders.

Only schema-declared labels and property names (already checked against
``NAME_PATTERN`` by the registry) and integer windows are rendered into the
query text. Every value that originates from a caller travels as a
parameter.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, NamedTuple

from graphgate.features.graph.schemas import Direction, EntitySchema
from graphgate.features.graph.schemas.registry import check_name


class CypherQuery(NamedTuple):
    text: str
    parameters: dict[str, Any]
    columns: tuple[str, ...]


@dataclass(frozen=True)
class Hop:
    """One traversal step: edge label, direction and optional target label."""

    label: str
    direction: Direction = Direction.OUT
    target: str | None = None


def edge_pattern(label: str, direction: Direction, variable: str = "") -> str:
    """``-[r:LABEL]->`` for outbound, ``<-[r:LABEL]-`` for inbound."""
    body = f"[{variable}:{check_name(label)}]"
    if direction is Direction.OUT:
        return f"-{body}->"
    return f"<-{body}-"


def node_pattern(
    variable: str,
    label: str | None,
    key: str | None = None,
    param: str | None = None,
) -> str:
    label_part = f":{check_name(label)}" if label else ""
    if key is None or param is None:
        return f"({variable}{label_part})"
    return f"({variable}{label_part} {{{check_name(key)}: ${param}}})"


# SKIP is an int8 in AGE; past that bound every page is empty anyway
MAX_SKIP = 2**63 - 1


def _window(skip: int, limit: int) -> str:
    return f"SKIP {min(int(skip), MAX_SKIP)} LIMIT {int(limit)}"


def _direction(descending: bool) -> str:
    return "DESC" if descending else "ASC"


def match_node(schema: EntitySchema, identifier: str) -> CypherQuery:
    text = (
        f"MATCH {node_pattern('n', schema.label, schema.primary_key, 'id')} "
        "RETURN n"
    )
    return CypherQuery(text, {"id": identifier}, ("n",))


def list_nodes(
    schema: EntitySchema,
    filters: Mapping[str, Any],
    order_by: str,
    descending: bool,
    skip: int,
    limit: int,
) -> CypherQuery:
    parameters: dict[str, Any] = {}
    conditions: list[str] = []
    for name, value in filters.items():
        param = f"f_{check_name(name)}"
        conditions.append(f"n.{name} = ${param}")
        parameters[param] = value

    where = f" WHERE {' AND '.join(conditions)}" if conditions else ""
    text = (
        f"MATCH {node_pattern('n', schema.label)}{where} "
        f"RETURN n ORDER BY n.{check_name(order_by)} {_direction(descending)} "
        f"{_window(skip, limit)}"
    )
    return CypherQuery(text, parameters, ("n",))


def _property_map(
    properties: Mapping[str, Any], prefix: str
) -> tuple[str, dict[str, Any]]:
    parameters = {f"{prefix}{check_name(k)}": v for k, v in properties.items()}
    body = ", ".join(f"{k}: ${prefix}{k}" for k in properties)
    return f"{{{body}}}", parameters


def create_node(schema: EntitySchema, properties: Mapping[str, Any]) -> CypherQuery:
    property_map, parameters = _property_map(properties, "p_")
    text = f"CREATE (n:{check_name(schema.label)} {property_map}) RETURN n"
    return CypherQuery(text, parameters, ("n",))


def update_node(
    schema: EntitySchema, identifier: str, properties: Mapping[str, Any]
) -> CypherQuery:
    if not properties:
        raise ValueError("update_node needs at least one property")
    assignments = ", ".join(f"n.{check_name(k)} = $p_{k}" for k in properties)
    parameters = {f"p_{k}": v for k, v in properties.items()}
    parameters["id"] = identifier
    text = (
        f"MATCH {node_pattern('n', schema.label, schema.primary_key, 'id')} "
        f"SET {assignments} RETURN n"
    )
    return CypherQuery(text, parameters, ("n",))


def delete_node(schema: EntitySchema, identifier: str) -> CypherQuery:
    """Delete a node and its incident edges, returning how many nodes went."""
    text = (
        f"MATCH {node_pattern('n', schema.label, schema.primary_key, 'id')} "
        "DETACH DELETE n RETURN count(*)"
    )
    return CypherQuery(text, {"id": identifier}, ("deleted",))


def _edge_between(
    from_schema: EntitySchema,
    label: str,
    direction: Direction,
    to_schema: EntitySchema,
) -> str:
    return (
        f"{node_pattern('f', from_schema.label, from_schema.primary_key, 'from_id')}"
        f"{edge_pattern(label, direction, 'r')}"
        f"{node_pattern('t', to_schema.label, to_schema.primary_key, 'to_id')}"
    )


def find_edges(
    from_schema: EntitySchema,
    label: str,
    direction: Direction,
    to_schema: EntitySchema,
    from_id: str,
    to_id: str,
) -> CypherQuery:
    text = f"MATCH {_edge_between(from_schema, label, direction, to_schema)} RETURN r"
    return CypherQuery(text, {"from_id": from_id, "to_id": to_id}, ("r",))


def create_edge(
    from_schema: EntitySchema,
    label: str,
    direction: Direction,
    to_schema: EntitySchema,
    from_id: str,
    to_id: str,
    properties: Mapping[str, Any],
) -> CypherQuery:
    property_map, parameters = _property_map(properties, "e_")
    body = f"[r:{check_name(label)} {property_map}]"
    arrow = f"-{body}->" if direction is Direction.OUT else f"<-{body}-"
    text = (
        f"MATCH {node_pattern('f', from_schema.label, from_schema.primary_key, 'from_id')}, "
        f"{node_pattern('t', to_schema.label, to_schema.primary_key, 'to_id')} "
        f"CREATE (f){arrow}(t) RETURN r"
    )
    parameters.update(from_id=from_id, to_id=to_id)
    return CypherQuery(text, parameters, ("r",))


def delete_edges(
    from_schema: EntitySchema,
    label: str,
    direction: Direction,
    to_schema: EntitySchema,
    from_id: str,
    to_id: str,
) -> CypherQuery:
    text = (
        f"MATCH {_edge_between(from_schema, label, direction, to_schema)} "
        "DELETE r WITH count(r) AS c RETURN c"
    )
    return CypherQuery(text, {"from_id": from_id, "to_id": to_id}, ("c",))


def list_neighbours(
    from_schema: EntitySchema,
    from_id: str,
    label: str,
    direction: Direction,
    to_schema: EntitySchema,
    descending: bool,
    skip: int,
    limit: int,
) -> CypherQuery:
    text = (
        f"MATCH {node_pattern('f', from_schema.label, from_schema.primary_key, 'from_id')}"
        f"{edge_pattern(label, direction)}{node_pattern('t', to_schema.label)} "
        f"RETURN DISTINCT t ORDER BY t.{check_name(to_schema.primary_key)} "
        f"{_direction(descending)} {_window(skip, limit)}"
    )
    return CypherQuery(text, {"from_id": from_id}, ("t",))


def collect_path_ids(
    start: EntitySchema, identifier: str, hops: Sequence[Hop], key: str
) -> CypherQuery:
    """Distinct ``key`` values of the nodes reached by following ``hops``."""
    if not hops:
        raise ValueError("collect_path_ids needs at least one hop")
    pattern = node_pattern("s", start.label, start.primary_key, "id")
    for index, hop in enumerate(hops):
        variable = "x" if index == len(hops) - 1 else ""
        pattern += edge_pattern(hop.label, hop.direction)
        pattern += node_pattern(variable, hop.target)
    text = f"MATCH {pattern} RETURN collect(DISTINCT x.{check_name(key)})"
    return CypherQuery(text, {"id": identifier}, ("ids",))


def ranking_candidates(
    candidate: EntitySchema,
    category_hop: Hop,
    promoter_hop: Hop,
    category_key: str,
    promoter_key: str,
    location_key: str,
    category_filter: Sequence[str],
) -> CypherQuery:
    """Candidates with their category ids, promoter ids and promoter locations."""
    parameters: dict[str, Any] = {}
    where = ""
    if category_filter:
        where = f" WHERE c.{check_name(category_key)} IN $categories"
        parameters["categories"] = list(category_filter)

    text = (
        f"MATCH {node_pattern('p', candidate.label)}"
        f"{edge_pattern(category_hop.label, category_hop.direction)}"
        f"{node_pattern('c', category_hop.target)}{where} "
        f"OPTIONAL MATCH (p){edge_pattern(promoter_hop.label, promoter_hop.direction)}"
        f"{node_pattern('m', promoter_hop.target)} "
        f"RETURN p, collect(DISTINCT c.{check_name(category_key)}), "
        f"collect(DISTINCT m.{check_name(promoter_key)}), "
        f"collect(m.{check_name(location_key)})"
    )
    return CypherQuery(
        text, parameters, ("promotion", "categories", "promoters", "locations")
    )
