"""Recommendation route handler."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from graphgate.features.graph.dispatch import dispatch
from graphgate.features.graph.routes.dependencies import (
    get_recommend_promotions_use_case,
)
from graphgate.features.graph.usecases import RecommendPromotionsUseCase

router = APIRouter()


@router.post("/recommendations/promotions")
async def recommended_promotions(
    payload: dict[str, Any] = Body(default_factory=dict),
    use_case: RecommendPromotionsUseCase = Depends(get_recommend_promotions_use_case),
) -> JSONResponse:
    """Promotions ranked for a user near a location.

    Body: ``uuid``, ``location`` ``{x, y}``, optional ``categories``,
    ``limit`` and ``page``.
    """
    outcome = await dispatch(use_case.execute(payload))
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
