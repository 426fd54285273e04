"""Points-rule operations beyond the generic dashboard flow."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Mapping
from uuid import UUID

from loguru import logger
from pydantic import BaseModel

from rewards_admin.db.store import Store, StoreError, StoreResult
from rewards_admin.services.actions.cache import PathCache
from rewards_admin.services.actions.registry import EntityConfig, get_entity_config
from rewards_admin.services.actions.repository import EntityRepository


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _as_date(value: Any) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _as_time(value: Any) -> time | None:
    if value is None or isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


def _as_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(str(value))
    return _ensure_aware(value)


def _sort_timestamp(value: Any) -> float:
    moment = _as_datetime(value)
    return moment.timestamp() if moment is not None else 0.0


def js_weekday(moment: datetime) -> int:
    """Day of week numbered from Sunday (0) to Saturday (6)."""

    return (moment.weekday() + 1) % 7


def rule_applies_at(rule: Mapping[str, Any], at: datetime) -> bool:
    """Whether an active rule's schedule window contains ``at``.

    Time windows whose start is later than their end wrap past midnight.
    """

    if not rule.get("is_active"):
        return False
    at = _ensure_aware(at)

    start_date = _as_date(rule.get("start_date"))
    end_date = _as_date(rule.get("end_date"))
    if start_date is not None and at.date() < start_date:
        return False
    if end_date is not None and at.date() > end_date:
        return False

    valid_from = _as_datetime(rule.get("valid_from"))
    valid_until = _as_datetime(rule.get("valid_until"))
    if valid_from is not None and at < valid_from:
        return False
    if valid_until is not None and at > valid_until:
        return False

    days = rule.get("days_of_week")
    if days and js_weekday(at) not in {int(day) for day in days}:
        return False

    time_start = _as_time(rule.get("time_start"))
    time_end = _as_time(rule.get("time_end"))
    current = at.time().replace(tzinfo=None)
    if time_start is not None and time_end is not None and time_start > time_end:
        return current >= time_start or current <= time_end
    if time_start is not None and current < time_start:
        return False
    if time_end is not None and current > time_end:
        return False
    return True


class PointsRuleRepository(EntityRepository):
    """Entity repository that checks branch ownership before writing."""

    def __init__(self, store: Store, config: EntityConfig | None = None) -> None:
        super().__init__(store, config or get_entity_config("points_rule"))

    async def create(self, payload: Mapping[str, Any] | BaseModel) -> StoreResult:
        error = await self._check_branch(payload)
        if error is not None:
            return StoreResult(error=error)
        return await super().create(payload)

    async def update(self, entity_id: UUID | str, payload: Mapping[str, Any] | BaseModel) -> StoreResult:
        error = await self._check_branch(payload)
        if error is not None:
            return StoreResult(error=error)
        return await super().update(entity_id, payload)

    async def _check_branch(self, payload: Mapping[str, Any] | BaseModel) -> StoreError | None:
        parsed = self.validate(payload)
        if not parsed.success or parsed.data.branch_id is None:
            # invalid payloads are reported by the base repository
            return None
        return await check_branch_ownership(
            self._store,
            organization_id=parsed.data.organization_id,
            branch_id=parsed.data.branch_id,
        )


async def check_branch_ownership(store: Store, *, organization_id: UUID, branch_id: UUID) -> StoreError | None:
    result = await store.table("branch").select("id", "organization_id").eq("id", branch_id).single().execute()
    if result.error is not None:
        return StoreError(code="invalid_branch", message="Invalid branch", details=result.error.message)
    if result.data["organization_id"] != organization_id:
        logger.warning(
            "Points rule branch outside organization",
            branch_id=str(branch_id),
            organization_id=str(organization_id),
        )
        return StoreError(code="branch_mismatch", message="Branch does not belong to the organization")
    return None


class PointsRuleService:
    """Status toggling, active listing and schedule-aware offer lookup."""

    def __init__(self, store: Store, cache: PathCache | None = None) -> None:
        self._store = store
        self._cache = cache
        self._config = get_entity_config("points_rule")

    async def toggle_status(self, rule_id: UUID, is_active: bool) -> StoreResult:
        result = await (
            self._store.table("points_rule")
            .update({"is_active": is_active})
            .eq("id", rule_id)
            .select()
            .single()
            .execute()
        )
        if result.error is None:
            logger.info("Points rule status toggled", rule_id=str(rule_id), is_active=is_active)
            if self._cache is not None:
                await self._cache.revalidate_path(self._config.cache_path)
        return result

    async def list_active(self) -> StoreResult:
        return await (
            self._store.table("points_rule")
            .select()
            .eq("is_active", True)
            .order("created_at", ascending=False)
            .execute()
        )

    async def active_offers(
        self,
        at: datetime | None = None,
        *,
        organization_id: UUID | None = None,
        branch_id: UUID | None = None,
    ) -> StoreResult:
        """Active rules applicable at ``at``, highest priority first.

        Branch-less rules apply to every branch of their organization; a
        ``branch_id`` outside ``organization_id`` is an error.
        """

        at = _ensure_aware(at or datetime.now(timezone.utc))
        if branch_id is not None and organization_id is not None:
            error = await check_branch_ownership(
                self._store, organization_id=organization_id, branch_id=branch_id
            )
            if error is not None:
                return StoreResult(error=error)

        query = self._store.table("points_rule").select().eq("is_active", True)
        if organization_id is not None:
            query = query.eq("organization_id", organization_id)
        result = await query.execute()
        if result.error is not None:
            return result

        offers = [
            rule
            for rule in result.data
            if (branch_id is None or rule["branch_id"] in (None, branch_id)) and rule_applies_at(rule, at)
        ]
        offers.sort(key=lambda rule: (rule["priority"] or 0, _sort_timestamp(rule["created_at"])), reverse=True)
        return StoreResult(data=offers)


__all__ = [
    "PointsRuleRepository",
    "PointsRuleService",
    "check_branch_ownership",
    "js_weekday",
    "rule_applies_at",
]
