"""Boundary that turns dispatcher results and failures into responses."""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from graphgate.core.errors import GraphGateError, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchOutcome:
    """Status code and JSON-ready body for the routing layer."""

    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def _jsonable(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_jsonable(item) for item in result]
    return result


async def dispatch(operation: Awaitable[Any]) -> DispatchOutcome:
    """Await ``operation`` and map every known failure to a structured body.

    Store failures are logged where they happen and surface here as an
    opaque server error.
    """
    try:
        result = await operation
    except StoreError as e:
        logger.warning("Store failure surfaced to client: %s", e)
        return DispatchOutcome(e.status_code, e.to_payload())
    except GraphGateError as e:
        return DispatchOutcome(e.status_code, e.to_payload())
    return DispatchOutcome(200, _jsonable(result))
