"""Generic relationship route handlers."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from graphgate.features.graph.dispatch import dispatch
from graphgate.features.graph.routes.dependencies import get_relationship_use_cases
from graphgate.features.graph.usecases import RelationshipUseCases

router = APIRouter(prefix="/{from_type}/{relationship}/{to_type}")


@router.post("/add")
async def add_relationship(
    from_type: str,
    relationship: str,
    to_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: RelationshipUseCases = Depends(get_relationship_use_cases),
) -> JSONResponse:
    """Relate ``from_uuid`` to ``to_uuid``; ``force`` allows duplicates."""
    outcome = await dispatch(
        use_cases.add_relationship(from_type, to_type, relationship, payload)
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.post("/between")
async def list_relationship_between(
    from_type: str,
    relationship: str,
    to_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: RelationshipUseCases = Depends(get_relationship_use_cases),
) -> JSONResponse:
    outcome = await dispatch(
        use_cases.list_relationship_between(from_type, to_type, relationship, payload)
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.post("/related")
async def list_related(
    from_type: str,
    relationship: str,
    to_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: RelationshipUseCases = Depends(get_relationship_use_cases),
) -> JSONResponse:
    outcome = await dispatch(
        use_cases.list_related(from_type, to_type, relationship, payload)
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.post("/remove")
async def remove_relationship_between(
    from_type: str,
    relationship: str,
    to_type: str,
    payload: dict[str, Any] = Body(default_factory=dict),
    use_cases: RelationshipUseCases = Depends(get_relationship_use_cases),
) -> JSONResponse:
    outcome = await dispatch(
        use_cases.remove_relationship_between(from_type, to_type, relationship, payload)
    )
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
