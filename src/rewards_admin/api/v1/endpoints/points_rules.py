"""Points-rule endpoints beyond the generic dashboard CRUD."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from rewards_admin.api.dependencies.store import get_path_cache, get_store
from rewards_admin.core.settings import settings
from rewards_admin.db.store import Store
from rewards_admin.services.actions import PathCache
from rewards_admin.services.loyalty import PointsRuleService

from .dashboard import raise_for_store_error


router = APIRouter(
    prefix=f"{settings.dashboard_path_prefix.rstrip('/')}/points_rule",
    tags=["Points rule"],
)


class ToggleStatusRequest(BaseModel):
    isActive: bool = Field(..., description="New active flag for the rule")


def get_points_rule_service(
    store: Store = Depends(get_store),
    cache: PathCache = Depends(get_path_cache),
) -> PointsRuleService:
    return PointsRuleService(store, cache)


@router.get("/active", summary="Active points rules, newest first")
async def list_active_rules(
    service: PointsRuleService = Depends(get_points_rule_service),
) -> list[dict[str, Any]]:
    result = await service.list_active()
    raise_for_store_error(result.error, label="Points rule")
    return result.data


@router.get("/offers", summary="Rules applicable at a point in time")
async def list_active_offers(
    organization_id: Optional[UUID] = Query(None, alias="organizationId"),
    branch_id: Optional[UUID] = Query(None, alias="branchId"),
    at: Optional[datetime] = Query(None, description="Defaults to the current time"),
    service: PointsRuleService = Depends(get_points_rule_service),
) -> list[dict[str, Any]]:
    result = await service.active_offers(at, organization_id=organization_id, branch_id=branch_id)
    raise_for_store_error(result.error, label="Points rule")
    return result.data


@router.post("/{rule_id}/toggle", summary="Activate or deactivate a points rule")
async def toggle_rule_status(
    rule_id: UUID,
    payload: ToggleStatusRequest,
    service: PointsRuleService = Depends(get_points_rule_service),
) -> dict[str, Any]:
    result = await service.toggle_status(rule_id, payload.isActive)
    raise_for_store_error(result.error, label="Points rule")
    return result.data
