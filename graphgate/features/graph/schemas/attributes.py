"""Attribute and relationship declarations.

Attribute values are kept in their storage form: identifiers as canonical
UUID strings, timestamps as ISO-8601 strings in UTC and points as
``{"x": float, "y": float}`` maps.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any
from uuid import UUID, uuid4

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError


class AttributeKind(str, Enum):
    """Closed set of attribute value kinds."""

    IDENTIFIER = "identifier"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    POINT = "point"


class Direction(str, Enum):
    """Edge direction as seen from the declaring entity type."""

    OUT = "out"
    IN = "in"

    @classmethod
    def parse(cls, value: str) -> "Direction":
        """Accept ``out``/``in`` and ``outbound``/``inbound`` in any case."""
        normalized = value.strip().lower()
        if normalized in ("out", "outbound"):
            return cls.OUT
        if normalized in ("in", "inbound"):
            return cls.IN
        raise ValueError("Direction must be one of 'out', 'in'")

    def reverse(self) -> "Direction":
        return Direction.IN if self is Direction.OUT else Direction.OUT


def now_iso() -> str:
    """Current UTC instant in storage form."""
    return datetime.now(UTC).isoformat()


def new_identifier() -> str:
    return str(uuid4())


_UUID_ADAPTER = TypeAdapter(UUID)
_DATETIME_ADAPTER = TypeAdapter(datetime)


def coerce_identifier(value: Any) -> str:
    if not isinstance(value, (str, UUID)):
        raise ValueError("must be a valid uuid")
    try:
        return str(_UUID_ADAPTER.validate_python(value))
    except PydanticValidationError:
        raise ValueError("must be a valid uuid") from None


def coerce_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("must be a string")
    if not value.strip():
        raise ValueError("must not be empty")
    return value


def coerce_timestamp(value: Any) -> str:
    # numbers would otherwise pass as unix timestamps
    if not isinstance(value, (str, datetime)):
        raise ValueError("must be an ISO-8601 datetime")
    try:
        parsed = _DATETIME_ADAPTER.validate_python(value)
    except PydanticValidationError:
        raise ValueError("must be an ISO-8601 datetime") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).isoformat()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_point(value: Any) -> dict[str, float]:
    if not isinstance(value, Mapping):
        raise ValueError("Location format invalid, must be x,y")
    x, y = value.get("x"), value.get("y")
    if not (_is_number(x) and _is_number(y)):
        raise ValueError("Location format invalid, must be x,y")
    return {"x": float(x), "y": float(y)}


COERCERS: Mapping[AttributeKind, Callable[[Any], Any]] = MappingProxyType(
    {
        AttributeKind.IDENTIFIER: coerce_identifier,
        AttributeKind.TEXT: coerce_text,
        AttributeKind.TIMESTAMP: coerce_timestamp,
        AttributeKind.POINT: coerce_point,
    }
)


@dataclass(frozen=True)
class AttributeSpec:
    """Declaration of a single node or edge attribute.

    ``unique`` values supplied by a caller are checked on create. ``indexed``
    only records intent; no index is created by this service.
    """

    kind: AttributeKind
    required: bool = False
    unique: bool = False
    indexed: bool = False
    primary: bool = False
    readonly: bool = False
    default: Callable[[], Any] | None = None

    def coerce(self, value: Any) -> Any:
        """Convert a raw payload value to storage form, raising ValueError."""
        return COERCERS[self.kind](value)

    def default_value(self) -> Any:
        """Value used when the payload omits this attribute, or None."""
        if self.default is not None:
            return self.default()
        return None


def identifier(**flags: bool) -> AttributeSpec:
    """Generated, immutable identifier attribute."""
    return AttributeSpec(
        kind=AttributeKind.IDENTIFIER,
        default=new_identifier,
        unique=True,
        indexed=True,
        **flags,
    )


def text(**flags: bool) -> AttributeSpec:
    return AttributeSpec(kind=AttributeKind.TEXT, **flags)


def timestamp() -> AttributeSpec:
    """Timestamp stamped by the dispatcher, defaulting to the creation instant."""
    return AttributeSpec(kind=AttributeKind.TIMESTAMP, readonly=True, default=now_iso)


def point(**flags: bool) -> AttributeSpec:
    return AttributeSpec(kind=AttributeKind.POINT, **flags)


@dataclass(frozen=True)
class RelationshipSpec:
    """Outbound (or inbound) relationship declared on an entity type."""

    name: str
    target: str
    label: str
    direction: Direction = Direction.OUT
    properties: Mapping[str, AttributeSpec] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def identifier_property(self) -> str | None:
        """Name of the edge's own identifier attribute, if it declares one."""
        for name, spec in self.properties.items():
            if spec.kind is AttributeKind.IDENTIFIER:
                return name
        return None

    def default_properties(self) -> dict[str, Any]:
        """Edge properties built entirely from declared defaults."""
        values: dict[str, Any] = {}
        for name, spec in self.properties.items():
            value = spec.default_value()
            if value is not None:
                values[name] = value
        return values
