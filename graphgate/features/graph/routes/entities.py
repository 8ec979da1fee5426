"""Generic entity route handlers."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from graphgate.features.graph.dispatch import dispatch
from graphgate.features.graph.routes.dependencies import get_entity_use_cases
from graphgate.features.graph.usecases import EntityUseCases

router = APIRouter()


def _respond(status_code: int, body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


@router.post("/{entity_type}/list")
async def list_entities(
    entity_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: EntityUseCases = Depends(get_entity_use_cases),
) -> JSONResponse:
    """Ordered, paginated list of entities of one type."""
    outcome = await dispatch(use_cases.list_entities(entity_type, payload))
    return _respond(outcome.status_code, outcome.body)


@router.post("/{entity_type}/find")
async def find_entity(
    entity_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: EntityUseCases = Depends(get_entity_use_cases),
) -> JSONResponse:
    outcome = await dispatch(use_cases.find_entity(entity_type, payload))
    return _respond(outcome.status_code, outcome.body)


@router.post("/{entity_type}/add")
async def create_entity(
    entity_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: EntityUseCases = Depends(get_entity_use_cases),
) -> JSONResponse:
    outcome = await dispatch(use_cases.create_entity(entity_type, payload))
    return _respond(outcome.status_code, outcome.body)


@router.post("/{entity_type}/update")
async def update_entity(
    entity_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: EntityUseCases = Depends(get_entity_use_cases),
) -> JSONResponse:
    outcome = await dispatch(use_cases.update_entity(entity_type, payload))
    return _respond(outcome.status_code, outcome.body)


@router.post("/{entity_type}/remove")
async def remove_entity(
    entity_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: EntityUseCases = Depends(get_entity_use_cases),
) -> JSONResponse:
    """Permanently remove an entity and detach its relationships."""
    outcome = await dispatch(use_cases.remove_entity(entity_type, payload))
    return _respond(outcome.status_code, outcome.body)
