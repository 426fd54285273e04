from uuid import uuid4

import pytest
from pydantic import ValidationError, model_validator

from rewards_admin.core.settings import settings
from rewards_admin.db.store import StoreError, StoreResult
from rewards_admin.models import Address
from rewards_admin.schemas.common import FormSchema, OptionalText
from rewards_admin.schemas.organization import AddressInput
from rewards_admin.services.actions.cache import PathCache
from rewards_admin.services.actions.pipeline import (
    EMPTY_ACTION_STATE,
    FormActionPipeline,
    from_error_to_action_state,
    to_action_state,
)
from rewards_admin.services.actions.registry import EntityConfig, get_entity_config
from rewards_admin.services.actions.repository import EntityRepository


VALID_ADDRESS = {
    "street": "Av. Siempre Viva",
    "number": "742",
    "city": "Springfield",
    "state": "OR",
    "zip_code": "97403",
}


class FakeRepository(EntityRepository):
    def __init__(self, config=None, *, result=None, raises=None) -> None:
        super().__init__(store=None, config=config or get_entity_config("address"))
        self.result = result or StoreResult(data={"id": uuid4()})
        self.raises = raises
        self.created = []
        self.updated = []

    async def create(self, payload):
        self.created.append(payload)
        if self.raises:
            raise self.raises
        return self.result

    async def update(self, entity_id, payload):
        self.updated.append((entity_id, payload))
        if self.raises:
            raise self.raises
        return self.result


class RecordingCache(PathCache):
    def __init__(self) -> None:
        super().__init__()
        self.revalidated = []

    async def revalidate_path(self, path):
        self.revalidated.append(path)
        return await super().revalidate_path(path)


def _pipeline(repository):
    cache = RecordingCache()
    return FormActionPipeline(repository, cache, settings), cache


@pytest.mark.asyncio
async def test_invalid_submission_never_reaches_store() -> None:
    repository = FakeRepository()
    pipeline, cache = _pipeline(repository)

    state = await pipeline.submit({"street": "", "number": "742"})

    assert state.status == "invalid"
    assert state.field_errors["street"] == "Street is required"
    assert "number" not in state.field_errors
    assert repository.created == [] and repository.updated == []
    assert cache.revalidated == []


@pytest.mark.asyncio
async def test_create_success_revalidates_and_redirects() -> None:
    repository = FakeRepository()
    pipeline, cache = _pipeline(repository)

    state = await pipeline.submit(VALID_ADDRESS)

    assert state.status == "success"
    assert state.message == "Address created successfully!"
    assert state.field_errors == {}
    assert state.redirect_to == "/dashboard/address"
    assert state.redirect_after_ms == settings.success_redirect_delay_ms
    assert len(repository.created) == 1
    assert repository.created[0].street == "Av. Siempre Viva"
    assert cache.revalidated[0] == "/dashboard/address"
    assert {"/dashboard/branch", "/dashboard/beneficiary"} <= set(cache.revalidated)


@pytest.mark.asyncio
async def test_submission_with_id_updates() -> None:
    repository = FakeRepository()
    pipeline, cache = _pipeline(repository)
    entity_id = str(uuid4())

    state = await pipeline.submit({**VALID_ADDRESS, "id": entity_id})

    assert state.message == "Address updated successfully!"
    assert repository.created == []
    assert repository.updated[0][0] == entity_id
    assert cache.revalidated == list(get_entity_config("address").revalidation_paths)


@pytest.mark.asyncio
async def test_blank_id_creates() -> None:
    repository = FakeRepository()
    pipeline, _ = _pipeline(repository)

    state = await pipeline.submit({**VALID_ADDRESS, "id": ""})

    assert state.message == "Address created successfully!"
    assert len(repository.created) == 1


@pytest.mark.asyncio
async def test_store_error_is_reported_without_revalidation() -> None:
    repository = FakeRepository(result=StoreResult(error=StoreError(code="integrity_error", message="dup")))
    pipeline, cache = _pipeline(repository)

    state = await pipeline.submit(VALID_ADDRESS)

    assert state.status == "failed"
    assert state.message == "An error occurred while saving the address."
    assert state.redirect_to is None
    assert cache.revalidated == []


@pytest.mark.asyncio
async def test_raised_exception_becomes_failed_state() -> None:
    repository = FakeRepository(raises=RuntimeError("connection reset"))
    pipeline, cache = _pipeline(repository)

    state = await pipeline.submit(VALID_ADDRESS)

    assert state.status == "failed"
    assert state.message == "connection reset"
    assert cache.revalidated == []


class _MatchingCoordinates(FormSchema):
    latitude: OptionalText = None
    longitude: OptionalText = None

    @model_validator(mode="after")
    def _both_or_neither(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude go together")
        return self


@pytest.mark.asyncio
async def test_model_level_error_is_surfaced_as_message() -> None:
    config = EntityConfig(name="address", label="Address", model=Address, schema=_MatchingCoordinates)
    repository = FakeRepository(config)
    pipeline, _ = _pipeline(repository)

    state = await pipeline.submit({"latitude": "1.5"})

    assert state.status == "invalid"
    assert state.field_errors == {}
    assert "latitude and longitude go together" in state.message


def test_error_conversion_helpers() -> None:
    with pytest.raises(ValidationError) as excinfo:
        AddressInput.model_validate({})
    validation_state = from_error_to_action_state(excinfo.value)

    assert validation_state.field_errors["zip_code"] == "Zip code is required"
    assert from_error_to_action_state(ValueError("bad input")).message == "bad input"
    assert from_error_to_action_state("nope").message == "An unknown error occurred"
    assert to_action_state("Saved").status == "success"
    assert EMPTY_ACTION_STATE.message == "" and EMPTY_ACTION_STATE.field_errors == {}


def test_action_state_serializes_with_client_keys() -> None:
    state = to_action_state("Saved", redirect_to="/dashboard/status", redirect_after_ms=500)

    assert state.model_dump(by_alias=True) == {
        "message": "Saved",
        "fieldErrors": {},
        "status": "success",
        "redirectTo": "/dashboard/status",
        "redirectAfterMs": 500,
    }
