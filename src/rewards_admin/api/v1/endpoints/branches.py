"""Branch endpoints beyond the generic dashboard CRUD."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from rewards_admin.api.dependencies.store import get_path_cache, get_store
from rewards_admin.core.settings import settings
from rewards_admin.db.store import Store
from rewards_admin.schemas.action_state import ActionState
from rewards_admin.services.actions import PathCache
from rewards_admin.services.branches import BranchWithAddressPipeline

from .dashboard import SUBMIT_STATUS_CODES, form_payload


router = APIRouter(
    prefix=f"{settings.dashboard_path_prefix.rstrip('/')}/branch",
    tags=["Branch"],
)


@router.post("/with-address", summary="Create or update a branch together with its address", response_model=ActionState)
async def submit_branch_with_address(
    request: Request,
    response: Response,
    store: Store = Depends(get_store),
    cache: PathCache = Depends(get_path_cache),
) -> ActionState:
    pipeline = BranchWithAddressPipeline(store, cache, settings)
    state = await pipeline.submit(await form_payload(request))
    response.status_code = SUBMIT_STATUS_CODES.get(state.status or "", status.HTTP_200_OK)
    return state
