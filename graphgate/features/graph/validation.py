"""Request payload validation driven by schema attribute declarations.

Validation never raises: it returns the typed properties it could build
together with a list of ``{field: message}`` errors. Callers decide what to
do with a non-empty error list.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

import pydantic
from pydantic import BaseModel, Field

from graphgate.features.graph.schemas import AttributeKind, AttributeSpec

REQUIRED_IDENTIFIER = AttributeSpec(kind=AttributeKind.IDENTIFIER, required=True)


@dataclass
class ValidatedInput:
    """Typed properties plus field-level errors."""

    properties: dict[str, Any] = field(default_factory=dict)
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def identifier_fields(*names: str) -> dict[str, AttributeSpec]:
    """Field map of required identifiers, e.g. ``from_uuid``/``to_uuid``."""
    return {name: REQUIRED_IDENTIFIER for name in names}


def validate(
    raw_payload: Any,
    fields: Mapping[str, AttributeSpec],
    *,
    apply_defaults: bool = True,
    partial: bool = False,
) -> ValidatedInput:
    """Coerce the allowed fields of ``raw_payload``.

    Keys outside ``fields`` are dropped. A missing field falls back to its
    declared default when ``apply_defaults`` is set; otherwise a missing
    required field is reported unless ``partial`` is set (updates).
    """
    result = ValidatedInput()
    if not isinstance(raw_payload, Mapping):
        result.errors.append({"body": "must be a JSON object"})
        return result

    for name, spec in fields.items():
        value = raw_payload.get(name)
        if value is not None:
            try:
                result.properties[name] = spec.coerce(value)
            except ValueError as e:
                result.errors.append({name: str(e)})
            continue

        default = spec.default_value() if apply_defaults else None
        if default is not None:
            result.properties[name] = default
        elif spec.required and not partial:
            result.errors.append({name: "is required"})

    return result


class PageRequest(BaseModel):
    """Offset pagination and ordering parameters."""

    model_config = pydantic.ConfigDict(extra="ignore")

    order: str | None = Field(default=None, description="Attribute to order by")
    sort: Literal["ASC", "DESC"] = Field(default="ASC")
    limit: int | None = Field(default=None, ge=1)
    page: int = Field(default=1, ge=1)

    @pydantic.field_validator("sort", mode="before")
    @classmethod
    def normalize_sort(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @property
    def descending(self) -> bool:
        return self.sort == "DESC"


@dataclass(frozen=True)
class Page:
    """Resolved window: ``skip = (page - 1) * limit``."""

    limit: int
    page: int
    order: str | None
    descending: bool

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def parse_page(
    raw_payload: Any, *, default_limit: int, max_limit: int
) -> tuple[Page | None, list[dict[str, str]]]:
    """Build a :class:`Page` from ``order``/``sort``/``limit``/``page`` keys."""
    if not isinstance(raw_payload, Mapping):
        return None, [{"body": "must be a JSON object"}]
    try:
        request = PageRequest.model_validate(
            {k: v for k, v in raw_payload.items() if v is not None}
        )
    except pydantic.ValidationError as e:
        errors = [
            {".".join(str(p) for p in err["loc"]) or "body": err["msg"]}
            for err in e.errors()
        ]
        return None, errors

    limit = request.limit or default_limit
    if limit > max_limit:
        return None, [{"limit": f"must be at most {max_limit}"}]
    return Page(
        limit=limit,
        page=request.page,
        order=request.order,
        descending=request.descending,
    ), []
