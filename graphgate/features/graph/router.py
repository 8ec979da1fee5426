"""Graph API routes - main router that includes all route modules."""

from fastapi import APIRouter

from graphgate.features.graph.routes.entities import router as entities_router
from graphgate.features.graph.routes.recommendations import (
    router as recommendations_router,
)
from graphgate.features.graph.routes.relationships import (
    router as relationships_router,
)

router = APIRouter(prefix="/graph", tags=["graph"])

# fixed paths first so they win over the generic entity patterns
router.include_router(recommendations_router)
router.include_router(entities_router)
router.include_router(relationships_router)
