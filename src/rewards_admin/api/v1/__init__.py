from fastapi import APIRouter

from .endpoints import branches, dashboard, health, points_rules

router = APIRouter()
router.include_router(health.router, tags=["Health"])
# Fixed entity paths must win over the generic "/{entity_id}" routes.
router.include_router(points_rules.router)
router.include_router(branches.router)
router.include_router(dashboard.router)
