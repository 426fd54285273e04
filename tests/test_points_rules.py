from datetime import date, datetime, time, timezone
from uuid import uuid4

import pytest

from rewards_admin.db.store import Store
from rewards_admin.services.actions.cache import PathCache
from rewards_admin.services.loyalty import PointsRuleRepository, PointsRuleService, js_weekday, rule_applies_at


# A Sunday.
NOON = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _rule(**overrides) -> dict:
    rule = {
        "is_active": True,
        "start_date": None,
        "end_date": None,
        "valid_from": None,
        "valid_until": None,
        "days_of_week": None,
        "time_start": None,
        "time_end": None,
    }
    rule.update(overrides)
    return rule


def test_js_weekday_counts_from_sunday() -> None:
    assert js_weekday(NOON) == 0
    assert js_weekday(datetime(2026, 10, 19, tzinfo=timezone.utc)) == 1


def test_rule_without_schedule_always_applies() -> None:
    assert rule_applies_at(_rule(), NOON)
    assert not rule_applies_at(_rule(is_active=False), NOON)


def test_date_and_validity_windows() -> None:
    assert rule_applies_at(_rule(start_date=date(2026, 10, 1), end_date=date(2026, 10, 18)), NOON)
    assert not rule_applies_at(_rule(end_date=date(2026, 10, 17)), NOON)
    assert not rule_applies_at(_rule(valid_from=datetime(2026, 10, 18, 13, 0, tzinfo=timezone.utc)), NOON)
    # naive timestamps are read as UTC
    assert rule_applies_at(_rule(valid_until=datetime(2026, 10, 18, 12, 30)), NOON)


def test_days_of_week_filter() -> None:
    assert rule_applies_at(_rule(days_of_week=[0, 6]), NOON)
    assert not rule_applies_at(_rule(days_of_week=[1, 2, 3]), NOON)


def test_time_window_including_overnight_ranges() -> None:
    assert rule_applies_at(_rule(time_start=time(9, 0), time_end=time(17, 0)), NOON)
    assert not rule_applies_at(_rule(time_start=time(13, 0)), NOON)
    overnight = _rule(time_start=time(22, 0), time_end=time(2, 0))
    assert not rule_applies_at(overnight, NOON)
    assert rule_applies_at(overnight, NOON.replace(hour=23))
    assert rule_applies_at(overnight, NOON.replace(hour=1))


async def _seed(store: Store) -> dict:
    ids = {}
    for name in ("Acme", "Other"):
        result = await store.table("organization").insert([{"name": name}]).select().single().execute()
        ids[name] = result.data["id"]
    for name, organization in (("Centro", "Acme"), ("Norte", "Other")):
        result = await (
            store.table("branch")
            .insert([{"name": name, "organization_id": ids[organization]}])
            .select()
            .single()
            .execute()
        )
        ids[name] = result.data["id"]
    return ids


async def _insert_rule(store: Store, **values) -> dict:
    row = {"rule_type": "fixed_amount", "config": {"points_per_dollar": 1}, **values}
    result = await store.table("points_rule").insert([row]).select().single().execute()
    assert result.ok, result.error
    return result.data


@pytest.mark.asyncio
async def test_toggle_status_updates_row_and_revalidates(session_factory) -> None:
    cache = PathCache()
    await cache.set("/dashboard/points_rule", ["stale"])
    async with session_factory() as session:
        store = Store(session)
        ids = await _seed(store)
        rule = await _insert_rule(store, name="Base", organization_id=ids["Acme"])

        result = await PointsRuleService(store, cache).toggle_status(rule["id"], False)

    assert result.data["is_active"] is False
    assert await cache.get("/dashboard/points_rule") is None


@pytest.mark.asyncio
async def test_toggle_unknown_rule_is_not_found(session_factory) -> None:
    async with session_factory() as session:
        result = await PointsRuleService(Store(session)).toggle_status(uuid4(), True)

    assert result.error.code == "not_found"


@pytest.mark.asyncio
async def test_list_active_newest_first(session_factory) -> None:
    async with session_factory() as session:
        store = Store(session)
        ids = await _seed(store)
        await _insert_rule(
            store, name="Old", organization_id=ids["Acme"], created_at=datetime(2026, 1, 1, tzinfo=timezone.utc)
        )
        await _insert_rule(
            store, name="New", organization_id=ids["Acme"], created_at=datetime(2026, 6, 1, tzinfo=timezone.utc)
        )
        await _insert_rule(store, name="Off", organization_id=ids["Acme"], is_active=False)

        result = await PointsRuleService(store).list_active()

    assert [rule["name"] for rule in result.data] == ["New", "Old"]


@pytest.mark.asyncio
async def test_active_offers_filters_schedule_and_orders_by_priority(session_factory) -> None:
    async with session_factory() as session:
        store = Store(session)
        ids = await _seed(store)
        await _insert_rule(store, name="Everywhere", organization_id=ids["Acme"], priority=1)
        await _insert_rule(store, name="Centro only", organization_id=ids["Acme"], branch_id=ids["Centro"], priority=5)
        await _insert_rule(store, name="Weekdays", organization_id=ids["Acme"], days_of_week=[1, 2, 3, 4, 5], priority=9)
        await _insert_rule(store, name="Paused", organization_id=ids["Acme"], is_active=False, priority=10)
        await _insert_rule(store, name="Elsewhere", organization_id=ids["Other"], priority=7)

        result = await PointsRuleService(store).active_offers(
            NOON, organization_id=ids["Acme"], branch_id=ids["Centro"]
        )

    assert [rule["name"] for rule in result.data] == ["Centro only", "Everywhere"]


@pytest.mark.asyncio
async def test_active_offers_rejects_branch_of_other_organization(session_factory) -> None:
    async with session_factory() as session:
        store = Store(session)
        ids = await _seed(store)

        result = await PointsRuleService(store).active_offers(
            NOON, organization_id=ids["Acme"], branch_id=ids["Norte"]
        )

    assert result.error.code == "branch_mismatch"


@pytest.mark.asyncio
async def test_repository_checks_branch_ownership(session_factory) -> None:
    async with session_factory() as session:
        store = Store(session)
        ids = await _seed(store)
        repository = PointsRuleRepository(store)
        payload = {
            "name": "Centro double",
            "organization_id": str(ids["Acme"]),
            "points_per_dollar": "2",
            "is_active": "on",
        }

        rejected = await repository.create({**payload, "branch_id": str(ids["Norte"])})
        created = await repository.create({**payload, "branch_id": str(ids["Centro"])})
        listed = await repository.list()

    assert rejected.error.code == "branch_mismatch"
    assert created.ok
    assert created.data["config"] == {"points_per_dollar": 2.0}
    assert [row["name"] for row in listed.data] == ["Centro double"]
    assert listed.data[0]["branch"] == {"name": "Centro"}
