"""Query-builder facade over the async SQLAlchemy session.

Repositories talk to the database exclusively through :class:`Store`. Each
query is built fluently (``store.table("product").select().eq("id", pk).single()``)
and executed with ``await query.execute()``, which never raises for database
failures: errors come back as :class:`StoreError` inside a :class:`StoreResult`
so callers can render them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from loguru import logger
from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import rewards_admin.models  # noqa: F401  (registers tables on Base.metadata)
from rewards_admin.db.base import Base


@dataclass(frozen=True)
class StoreError:
    """Error payload returned (not raised) by store calls."""

    code: str
    message: str
    details: str | None = None


@dataclass(frozen=True)
class StoreResult:
    data: Any = None
    error: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class _Embed:
    alias: str
    table: Table
    via_column: str
    columns: tuple[str, ...]


@dataclass(frozen=True)
class _Order:
    column: str
    ascending: bool
    nulls_first: bool | None


class TableQuery:
    """Fluent builder for a single-table statement."""

    def __init__(self, session: AsyncSession, table: Table) -> None:
        self._session = session
        self._table = table
        self._action = "select"
        self._columns: tuple[str, ...] = ()
        self._embeds: list[_Embed] = []
        self._filters: list[tuple[str, Any]] = []
        self._orders: list[_Order] = []
        self._rows: list[dict[str, Any]] = []
        self._patch: dict[str, Any] = {}
        self._returning = False
        self._single = False
        self._build_error: StoreError | None = None

    @property
    def table_name(self) -> str:
        return self._table.name

    def select(self, *columns: str, **embeds: Sequence[str]) -> "TableQuery":
        """Project columns (all when empty) and embed related rows.

        ``select("id", "name", organization=("name",))`` joins ``organization``
        through the foreign key pointing at it and nests its ``name`` under
        ``row["organization"]``. After ``insert``/``update`` this requests the
        written rows back.
        """

        if self._action in {"insert", "update"}:
            self._returning = True
            return self
        self._columns = tuple(column for column in columns if column != "*")
        for column in self._columns:
            self._check_column(column)
        for alias, related_columns in embeds.items():
            self._add_embed(alias, tuple(related_columns))
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        self._check_column(column)
        self._filters.append((column, value))
        return self

    def order(
        self,
        column: str,
        *,
        ascending: bool = True,
        nulls_first: bool | None = None,
    ) -> "TableQuery":
        self._check_column(column)
        self._orders.append(_Order(column=column, ascending=ascending, nulls_first=nulls_first))
        return self

    def single(self) -> "TableQuery":
        self._single = True
        return self

    def insert(self, rows: Iterable[Mapping[str, Any]]) -> "TableQuery":
        self._action = "insert"
        self._rows = [dict(row) for row in rows]
        for row in self._rows:
            for column in row:
                self._check_column(column)
        return self

    def update(self, patch: Mapping[str, Any]) -> "TableQuery":
        self._action = "update"
        self._patch = dict(patch)
        for column in self._patch:
            self._check_column(column)
        return self

    def delete(self) -> "TableQuery":
        self._action = "delete"
        return self

    async def execute(self) -> StoreResult:
        if self._build_error is not None:
            return StoreResult(data=None, error=self._build_error)

        try:
            if self._action == "select":
                return await self._execute_select()
            if self._action == "insert":
                return await self._execute_insert()
            if self._action == "update":
                return await self._execute_update()
            return await self._execute_delete()
        except IntegrityError as exc:
            await self._session.rollback()
            logger.warning(
                "Store constraint violation",
                table=self.table_name,
                action=self._action,
                error=str(exc.orig),
            )
            return StoreResult(
                data=None,
                error=StoreError(code="integrity_error", message="Constraint violation", details=str(exc.orig)),
            )
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.warning(
                "Store call failed",
                table=self.table_name,
                action=self._action,
                error=str(exc),
            )
            return StoreResult(
                data=None,
                error=StoreError(code="database_error", message="Database error", details=str(exc)),
            )

    async def _execute_select(self) -> StoreResult:
        table = self._table
        base_columns = [table.c[name] for name in self._columns] if self._columns else list(table.c)
        projected = list(base_columns)
        source = table
        for embed in self._embeds:
            related = embed.table.alias(embed.alias)
            projected.extend(
                related.c[name].label(f"{embed.alias}__{name}") for name in embed.columns
            )
            target_column = next(iter(table.c[embed.via_column].foreign_keys)).column.name
            source = source.outerjoin(related, table.c[embed.via_column] == related.c[target_column])

        stmt = select(*projected).select_from(source)
        for column, value in self._filters:
            stmt = stmt.where(table.c[column] == value)
        for order in self._orders:
            expression = table.c[order.column].asc() if order.ascending else table.c[order.column].desc()
            if order.nulls_first is True:
                expression = expression.nulls_first()
            elif order.nulls_first is False:
                expression = expression.nulls_last()
            stmt = stmt.order_by(expression)

        result = await self._session.execute(stmt)
        rows = [self._nest(dict(row._mapping)) for row in result.all()]
        return self._shape(rows)

    async def _execute_insert(self) -> StoreResult:
        if not self._rows:
            return StoreResult(data=[] if not self._single else None, error=None)
        stmt = insert(self._table).returning(*self._table.c)
        result = await self._session.execute(stmt, self._rows)
        rows = [dict(row._mapping) for row in result.all()]
        await self._session.commit()
        logger.debug("Store insert", table=self.table_name, rows=len(rows))
        return self._shape(rows) if self._returning else StoreResult(data=None, error=None)

    async def _execute_update(self) -> StoreResult:
        stmt = update(self._table).values(**self._patch)
        for column, value in self._filters:
            stmt = stmt.where(self._table.c[column] == value)
        stmt = stmt.returning(*self._table.c)
        result = await self._session.execute(stmt)
        rows = [dict(row._mapping) for row in result.all()]
        await self._session.commit()
        logger.debug("Store update", table=self.table_name, rows=len(rows))
        return self._shape(rows) if self._returning else StoreResult(data=None, error=None)

    async def _execute_delete(self) -> StoreResult:
        stmt = delete(self._table)
        for column, value in self._filters:
            stmt = stmt.where(self._table.c[column] == value)
        await self._session.execute(stmt)
        await self._session.commit()
        logger.debug("Store delete", table=self.table_name)
        return StoreResult(data=None, error=None)

    def _shape(self, rows: list[dict[str, Any]]) -> StoreResult:
        if not self._single:
            return StoreResult(data=rows, error=None)
        if not rows:
            return StoreResult(
                data=None,
                error=StoreError(code="not_found", message=f"No {self.table_name} row matched"),
            )
        if len(rows) > 1:
            return StoreResult(
                data=None,
                error=StoreError(code="multiple_rows", message=f"More than one {self.table_name} row matched"),
            )
        return StoreResult(data=rows[0], error=None)

    def _nest(self, row: dict[str, Any]) -> dict[str, Any]:
        for embed in self._embeds:
            nested = {name: row.pop(f"{embed.alias}__{name}") for name in embed.columns}
            row[embed.alias] = nested if any(value is not None for value in nested.values()) else None
        return row

    def _add_embed(self, alias: str, columns: tuple[str, ...]) -> None:
        related, via_column = self._resolve_relationship(alias)
        if related is None or via_column is None:
            self._build_error = StoreError(
                code="undefined_relationship",
                message=f"No relationship between {self.table_name} and {alias}",
            )
            return
        for name in columns:
            if name not in related.c:
                self._build_error = StoreError(
                    code="undefined_column",
                    message=f"Column {alias}.{name} does not exist",
                )
                return
        self._embeds.append(_Embed(alias=alias, table=related, via_column=via_column, columns=columns))

    def _resolve_relationship(self, alias: str) -> tuple[Table | None, str | None]:
        # "<alias>_id" wins; otherwise the first foreign key targeting a table named <alias>.
        named_column = self._table.c.get(f"{alias}_id")
        if named_column is not None and named_column.foreign_keys:
            foreign_key = next(iter(named_column.foreign_keys))
            return foreign_key.column.table, named_column.name
        for column in self._table.c:
            for foreign_key in column.foreign_keys:
                if foreign_key.column.table.name == alias:
                    return foreign_key.column.table, column.name
        return None, None

    def _check_column(self, column: str) -> None:
        if column not in self._table.c and self._build_error is None:
            self._build_error = StoreError(
                code="undefined_column",
                message=f"Column {self.table_name}.{column} does not exist",
            )


class Store:
    """Entry point handed to repositories; one per request session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    def table(self, name: str) -> TableQuery:
        table = Base.metadata.tables.get(name)
        if table is None:
            raise KeyError(f"Unknown table: {name}")
        return TableQuery(self._session, table)


__all__ = ["Store", "StoreError", "StoreResult", "TableQuery"]
