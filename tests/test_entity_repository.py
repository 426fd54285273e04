from uuid import UUID, uuid4

import pytest

from rewards_admin.db.store import StoreError, StoreResult
from rewards_admin.services.actions.field_errors import FieldErrors
from rewards_admin.services.actions.registry import get_entity_config
from rewards_admin.services.actions.repository import EntityRepository


class RecordingQuery:
    def __init__(self, store: "RecordingStore", table: str) -> None:
        self._store = store
        self._call = {"table": table, "ops": []}
        store.calls.append(self._call)

    def _record(self, name: str, *args, **kwargs) -> "RecordingQuery":
        self._call["ops"].append((name, args, kwargs))
        return self

    def select(self, *args, **kwargs):
        return self._record("select", *args, **kwargs)

    def eq(self, *args):
        return self._record("eq", *args)

    def order(self, *args, **kwargs):
        return self._record("order", *args, **kwargs)

    def single(self):
        return self._record("single")

    def insert(self, rows):
        return self._record("insert", rows)

    def update(self, patch):
        return self._record("update", patch)

    def delete(self):
        return self._record("delete")

    async def execute(self) -> StoreResult:
        return self._store.result


class RecordingStore:
    def __init__(self, result: StoreResult | None = None) -> None:
        self.calls: list[dict] = []
        self.result = result or StoreResult(data={"id": uuid4()})

    def table(self, name: str) -> RecordingQuery:
        return RecordingQuery(self, name)


VALID_ADDRESS = {
    "street": "Av. Siempre Viva",
    "number": "742",
    "city": "Springfield",
    "state": "OR",
    "zip_code": "97403",
}


def _ops(call: dict) -> list[str]:
    return [name for name, _, _ in call["ops"]]


@pytest.mark.asyncio
async def test_create_inserts_validated_data_once() -> None:
    store = RecordingStore()
    repository = EntityRepository(store, get_entity_config("address"))

    result = await repository.create({**VALID_ADDRESS, "country": "", "ignored": "x"})

    assert result.ok
    assert len(store.calls) == 1
    call = store.calls[0]
    assert call["table"] == "address"
    assert _ops(call) == ["insert", "select", "single"]
    (rows,) = call["ops"][0][1]
    assert rows == [
        {
            **VALID_ADDRESS,
            "country": None,
            "place_id": None,
            "latitude": None,
            "longitude": None,
            "organization_id": None,
        }
    ]


@pytest.mark.asyncio
async def test_invalid_payload_makes_no_store_calls() -> None:
    store = RecordingStore()
    repository = EntityRepository(store, get_entity_config("address"))

    created = await repository.create({"street": ""})
    updated = await repository.update(uuid4(), {"street": ""})

    assert store.calls == []
    for result in (created, updated):
        assert isinstance(result.error, FieldErrors)
        assert result.error.errors["street"] == "Street is required"


@pytest.mark.asyncio
async def test_update_filters_by_id_and_never_writes_id() -> None:
    store = RecordingStore()
    repository = EntityRepository(store, get_entity_config("address"))
    entity_id = uuid4()

    await repository.update(str(entity_id), {**VALID_ADDRESS, "id": str(uuid4())})

    call = store.calls[0]
    assert _ops(call) == ["update", "eq", "select", "single"]
    (patch,) = call["ops"][0][1]
    assert "id" not in patch
    assert call["ops"][1][1] == ("id", entity_id)


@pytest.mark.asyncio
async def test_server_defaulted_columns_are_omitted_when_empty() -> None:
    store = RecordingStore()
    repository = EntityRepository(store, get_entity_config("organization"))

    await repository.create({"name": "Acme", "creation_date": ""})

    (rows,) = store.calls[0]["ops"][0][1]
    assert "creation_date" not in rows[0]


@pytest.mark.asyncio
async def test_store_errors_are_returned_verbatim() -> None:
    error = StoreError(code="integrity_error", message="Constraint violation")
    store = RecordingStore(StoreResult(error=error))
    repository = EntityRepository(store, get_entity_config("address"))

    result = await repository.create(VALID_ADDRESS)

    assert result.error is error


@pytest.mark.asyncio
async def test_delete_never_validates() -> None:
    store = RecordingStore(StoreResult())
    repository = EntityRepository(store, get_entity_config("address"))
    entity_id = uuid4()

    error = await repository.delete(entity_id)

    assert error is None
    assert _ops(store.calls[0]) == ["delete", "eq"]
    assert store.calls[0]["ops"][1][1] == ("id", entity_id)


@pytest.mark.asyncio
async def test_delete_returns_store_error() -> None:
    failure = StoreError(code="database_error", message="Database error")
    store = RecordingStore(StoreResult(error=failure))
    repository = EntityRepository(store, get_entity_config("category"))

    assert await repository.delete(uuid4()) is failure


@pytest.mark.asyncio
async def test_list_uses_configured_order_and_embeds() -> None:
    store = RecordingStore(StoreResult(data=[]))
    repository = EntityRepository(store, get_entity_config("app_user"))

    await repository.list()

    ops = store.calls[0]["ops"]
    assert ops[0] == ("select", ("*",), {"organization": ("name",)})
    assert ops[1] == ("order", ("first_name",), {"ascending": True, "nulls_first": False})


@pytest.mark.asyncio
async def test_get_rejects_malformed_identifier_without_query() -> None:
    store = RecordingStore()
    repository = EntityRepository(store, get_entity_config("category"))

    result = await repository.get("not-a-uuid")

    assert store.calls == []
    assert result.error.code == "invalid_id"


@pytest.mark.asyncio
async def test_get_selects_single_row() -> None:
    entity_id = uuid4()
    store = RecordingStore(StoreResult(data={"id": entity_id}))
    repository = EntityRepository(store, get_entity_config("category"))

    result = await repository.get(entity_id)

    assert isinstance(result.data["id"], UUID)
    assert _ops(store.calls[0]) == ["select", "eq", "single"]
