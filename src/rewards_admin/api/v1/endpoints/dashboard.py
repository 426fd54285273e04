"""CRUD and form endpoints generated for every dashboard entity."""

from __future__ import annotations

from typing import Any, Callable
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from rewards_admin.api.dependencies.store import get_path_cache, get_store
from rewards_admin.core.settings import settings
from rewards_admin.db.store import Store, StoreError, StoreResult
from rewards_admin.schemas.action_state import ActionState
from rewards_admin.services.actions import (
    ENTITY_CONFIGS,
    EntityConfig,
    EntityRepository,
    FormActionPipeline,
    PathCache,
)
from rewards_admin.services.forms import EntityForm, FormView
from rewards_admin.services.loyalty import PointsRuleRepository

RepositoryFactory = Callable[[Store, EntityConfig], EntityRepository]

REPOSITORY_FACTORIES: dict[str, RepositoryFactory] = {
    "points_rule": PointsRuleRepository,
}

SUBMIT_STATUS_CODES = {
    "success": status.HTTP_200_OK,
    "invalid": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "failed": status.HTTP_400_BAD_REQUEST,
}


class PrecheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    valid: bool
    field_errors: dict[str, str] = Field(default_factory=dict, alias="fieldErrors")


async def form_payload(request: Request) -> dict[str, Any]:
    """Read a form-encoded body; repeated keys become lists."""

    form = await request.form()
    payload: dict[str, Any] = {}
    for key in form.keys():
        values = [value for value in form.getlist(key) if isinstance(value, str)]
        if not values:
            continue
        payload[key] = values if len(values) > 1 else values[0]
    return payload


def raise_for_store_error(error: Any, *, label: str) -> None:
    if error is None:
        return
    if isinstance(error, StoreError) and error.code in {"not_found", "invalid_id"}:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    detail = error.message if isinstance(error, StoreError) else str(error)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def build_entity_router(config: EntityConfig) -> APIRouter:
    """Routes under ``/dashboard/<entity>`` for one configured entity."""

    factory = REPOSITORY_FACTORIES.get(config.name, EntityRepository)
    router = APIRouter(
        prefix=f"{settings.dashboard_path_prefix.rstrip('/')}/{config.name}",
        tags=[config.label],
    )
    form = EntityForm(config)

    def get_repository(store: Store = Depends(get_store)) -> EntityRepository:
        return factory(store, config)

    @router.get("", summary=f"List {config.label} records")
    async def list_entities(
        repository: EntityRepository = Depends(get_repository),
        cache: PathCache = Depends(get_path_cache),
    ) -> list[dict[str, Any]]:
        cached = await cache.get(config.cache_path)
        if cached is not None:
            return cached
        result: StoreResult = await repository.list()
        raise_for_store_error(result.error, label=config.label)
        await cache.set(config.cache_path, result.data)
        return result.data

    @router.post("", summary=f"Create or update a {config.label} record", response_model=ActionState)
    async def submit_entity(
        request: Request,
        response: Response,
        repository: EntityRepository = Depends(get_repository),
        cache: PathCache = Depends(get_path_cache),
    ) -> ActionState:
        payload = await form_payload(request)
        pipeline = FormActionPipeline(repository, cache, settings)
        state = await pipeline.submit(payload)
        response.status_code = SUBMIT_STATUS_CODES.get(state.status or "", status.HTTP_200_OK)
        return state

    @router.get("/form", summary=f"Blank {config.label} form", response_model=FormView)
    async def create_form(store: Store = Depends(get_store)) -> FormView:
        return form.render(options=await form.load_options(store))

    @router.post("/form/check", summary=f"Check a {config.label} submission", response_model=PrecheckResponse)
    async def precheck_form(request: Request) -> PrecheckResponse:
        errors = form.precheck(await form_payload(request))
        return PrecheckResponse(valid=not errors, field_errors=errors)

    @router.get("/form/{entity_id}", summary=f"Edit form for a {config.label} record", response_model=FormView)
    async def edit_form(
        entity_id: UUID,
        store: Store = Depends(get_store),
        repository: EntityRepository = Depends(get_repository),
    ) -> FormView:
        result = await repository.get(entity_id)
        raise_for_store_error(result.error, label=config.label)
        return form.render(result.data, options=await form.load_options(store))

    @router.get("/{entity_id}", summary=f"Get a {config.label} record")
    async def get_entity(
        entity_id: UUID,
        repository: EntityRepository = Depends(get_repository),
    ) -> dict[str, Any]:
        result = await repository.get(entity_id)
        raise_for_store_error(result.error, label=config.label)
        return result.data

    @router.delete("/{entity_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete a {config.label} record")
    async def delete_entity(
        entity_id: UUID,
        repository: EntityRepository = Depends(get_repository),
        cache: PathCache = Depends(get_path_cache),
    ) -> Response:
        error = await repository.delete(entity_id)
        if error is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.message)
        for path in config.revalidation_paths:
            await cache.revalidate_path(path)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


router = APIRouter()
for _config in ENTITY_CONFIGS.values():
    router.include_router(build_entity_router(_config))
