"""Tests for mapping dispatcher results to response outcomes."""

import pytest

from graphgate.core.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    UnknownEntityTypeError,
    ValidationError,
)
from graphgate.features.graph.dispatch import dispatch
from graphgate.features.graph.dtos import RemoveRelationshipResponse


async def _returning(value):
    return value


async def _raising(error: Exception):
    raise error


@pytest.mark.asyncio
async def test_success_serialises_models() -> None:
    outcome = await dispatch(
        _returning([RemoveRelationshipResponse(removed=1, message="Removed 1 relationships!")])
    )

    assert outcome.ok
    assert outcome.status_code == 200
    assert outcome.body == [{"removed": 1, "message": "Removed 1 relationships!"}]


@pytest.mark.asyncio
async def test_plain_values_pass_through() -> None:
    outcome = await dispatch(_returning({"uuid": "abc"}))

    assert outcome.body == {"uuid": "abc"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,status_code,body",
    [
        (
            ValidationError([{"name": "is required"}]),
            400,
            {"errors": [{"name": "is required"}]},
        ),
        (
            UnknownEntityTypeError("Planet"),
            400,
            {"errors": [{"entity_type": "Unknown entity type 'Planet'"}]},
        ),
        (
            NotFoundError("Mall", "abc"),
            404,
            {"message": "'Mall' with uuid 'abc' not found"},
        ),
        (ConflictError("already related"), 409, {"message": "already related"}),
    ],
)
async def test_known_failures(error: Exception, status_code: int, body: dict) -> None:
    outcome = await dispatch(_raising(error))

    assert not outcome.ok
    assert outcome.status_code == status_code
    assert outcome.body == body


@pytest.mark.asyncio
async def test_store_failure_is_opaque() -> None:
    outcome = await dispatch(_raising(StoreError("relation \"Mall\" does not exist")))

    assert outcome.status_code == 500
    assert outcome.body == {"message": "Internal server error"}


@pytest.mark.asyncio
async def test_unexpected_errors_propagate() -> None:
    with pytest.raises(RuntimeError):
        await dispatch(_raising(RuntimeError("bug")))
