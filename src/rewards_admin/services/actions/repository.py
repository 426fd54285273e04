"""Validated persistence for one dashboard entity."""

from __future__ import annotations

from typing import Any, Mapping
from uuid import UUID

from loguru import logger
from pydantic import BaseModel

from rewards_admin.db.store import Store, StoreError, StoreResult, TableQuery
from rewards_admin.schemas.validation import ParseResult, safe_parse

from .field_errors import FieldErrors
from .registry import EntityConfig

Payload = Mapping[str, Any] | BaseModel


class EntityRepository:
    """Create, update, delete and read rows of a single entity table.

    Writes are validated against the entity schema first; an invalid payload
    never reaches the store and comes back as ``StoreResult(error=FieldErrors)``.
    Store failures are returned untouched for the caller to report.
    """

    def __init__(self, store: Store, config: EntityConfig) -> None:
        self._store = store
        self.config = config

    def validate(self, payload: Payload) -> ParseResult:
        return safe_parse(self.config.schema, payload)

    async def create(self, payload: Payload) -> StoreResult:
        parsed = self.validate(payload)
        if not parsed.success:
            return self._invalid(parsed, action="create")

        row = self._row(parsed.data)
        return await self._query().insert([row]).select().single().execute()

    async def update(self, entity_id: UUID | str, payload: Payload) -> StoreResult:
        parsed = self.validate(payload)
        if not parsed.success:
            return self._invalid(parsed, action="update")

        identifier = _coerce_id(entity_id)
        if identifier is None:
            return StoreResult(error=_invalid_id(entity_id))

        patch = self._row(parsed.data)
        return await self._query().update(patch).eq("id", identifier).select().single().execute()

    async def delete(self, entity_id: UUID | str) -> StoreError | None:
        identifier = _coerce_id(entity_id)
        if identifier is None:
            return _invalid_id(entity_id)
        result = await self._query().delete().eq("id", identifier).execute()
        return result.error

    async def list(self) -> StoreResult:
        config = self.config
        return await (
            self._query()
            .select("*", **config.embeds)
            .order(config.order_by, ascending=config.ascending, nulls_first=config.nulls_first)
            .execute()
        )

    async def get(self, entity_id: UUID | str) -> StoreResult:
        identifier = _coerce_id(entity_id)
        if identifier is None:
            return StoreResult(error=_invalid_id(entity_id))
        return await self._query().select("*", **self.config.embeds).eq("id", identifier).single().execute()

    def _query(self) -> TableQuery:
        return self._store.table(self.config.name)

    def _row(self, data: BaseModel) -> dict[str, Any]:
        columns = self.config.columns
        row = {}
        for key, value in data.model_dump().items():
            if key == "id" or key not in columns:
                continue
            if value is None and key in self.config.server_defaults:
                continue
            row[key] = value
        return row

    def _invalid(self, parsed: ParseResult, *, action: str) -> StoreResult:
        errors = FieldErrors.from_issues(parsed.issues)
        logger.debug(
            "Entity payload rejected",
            entity=self.config.name,
            action=action,
            fields=sorted(errors.errors),
        )
        return StoreResult(data=None, error=errors)


def _coerce_id(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _invalid_id(value: Any) -> StoreError:
    return StoreError(code="invalid_id", message=f"Invalid identifier: {value}")


__all__ = ["EntityRepository"]
