"""Entity type declarations served by the registry."""

from graphgate.features.graph.schemas.attributes import (
    Direction,
    RelationshipSpec,
    identifier,
    point,
    text,
    timestamp,
)
from graphgate.features.graph.schemas.registry import EntitySchema


def _edge_properties() -> dict:
    # every edge carries its own identifier and creation instant
    return {"uuid": identifier(), "created_at": timestamp()}


def _timestamps() -> dict:
    return {"created_at": timestamp(), "updated_at": timestamp()}


CATEGORY_GROUP = EntitySchema(
    name="CategoryGroup",
    attributes={
        "uuid": identifier(primary=True, required=True),
        "name": text(required=True),
        **_timestamps(),
    },
)

CATEGORY = EntitySchema(
    name="Category",
    attributes={
        "uuid": identifier(primary=True, required=True),
        "name": text(required=True),
        **_timestamps(),
    },
    relationships={
        "in_group": RelationshipSpec(
            name="in_group",
            target="CategoryGroup",
            label="IN_GROUP",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
    },
)

MALL = EntitySchema(
    name="Mall",
    attributes={
        "uuid": identifier(primary=True, required=True),
        "name": text(required=True),
        "location": point(),
        **_timestamps(),
    },
    relationships={
        "in_category": RelationshipSpec(
            name="in_category",
            target="Category",
            label="IN_CATEGORY",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
    },
)

STORE = EntitySchema(
    name="Store",
    attributes={
        "uuid": identifier(primary=True),
        "name": text(required=True),
        "location": point(),  # {"x": 1.45, "y": 31.45}
        **_timestamps(),
    },
    relationships={
        "in_category": RelationshipSpec(
            name="in_category",
            target="Category",
            label="IN_CATEGORY",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
        "is_in": RelationshipSpec(
            name="is_in",
            target="Mall",
            label="IS_IN",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
    },
)

PROMOTION = EntitySchema(
    name="Promotion",
    attributes={
        "uuid": identifier(primary=True, required=True),
        "name": text(required=True),
        "description": text(),
        **_timestamps(),
    },
    relationships={
        "in_category": RelationshipSpec(
            name="in_category",
            target="Category",
            label="IN_CATEGORY",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
        "promoted_by_store": RelationshipSpec(
            name="promoted_by_store",
            target="Store",
            label="PROMOTED_BY",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
        "promoted_by_mall": RelationshipSpec(
            name="promoted_by_mall",
            target="Mall",
            label="PROMOTED_BY",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
    },
)

USER = EntitySchema(
    name="User",
    attributes={
        "uuid": identifier(primary=True, required=True),
        "name": text(required=True),
        **_timestamps(),
    },
    relationships={
        "interested_in": RelationshipSpec(
            name="interested_in",
            target="Category",
            label="INTERESTED_IN",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
        "viewed": RelationshipSpec(
            name="viewed",
            target="Promotion",
            label="VIEWED",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
        "bookmarked_store": RelationshipSpec(
            name="bookmarked_store",
            target="Store",
            label="BOOKMARKED",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
        "bookmarked_mall": RelationshipSpec(
            name="bookmarked_mall",
            target="Mall",
            label="BOOKMARKED",
            direction=Direction.OUT,
            properties=_edge_properties(),
        ),
    },
)

ENTITY_SCHEMAS: tuple[EntitySchema, ...] = (
    CATEGORY_GROUP,
    CATEGORY,
    MALL,
    STORE,
    PROMOTION,
    USER,
)
