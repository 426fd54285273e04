from datetime import datetime, timedelta, timezone

import pytest

from rewards_admin.services.actions.cache import PathCache


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.mark.asyncio
async def test_revalidate_drops_path_and_nested_entries() -> None:
    cache = PathCache()
    await cache.set("/dashboard/product", ["list"])
    await cache.set("/dashboard/product/42", {"id": 42})
    await cache.set("/dashboard/products-archive", ["other"])

    dropped = await cache.revalidate_path("/dashboard/product")

    assert sorted(dropped) == ["/dashboard/product", "/dashboard/product/42"]
    assert await cache.get("/dashboard/product") is None
    assert await cache.get("/dashboard/products-archive") == ["other"]


@pytest.mark.asyncio
async def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    cache = PathCache(ttl_seconds=60, clock=clock)
    await cache.set("/dashboard/category", ["a"])

    clock.now += timedelta(seconds=30)
    assert await cache.get("/dashboard/category") == ["a"]

    clock.now += timedelta(seconds=31)
    assert await cache.get("/dashboard/category") is None


@pytest.mark.asyncio
async def test_disabled_cache_never_serves() -> None:
    cache = PathCache(enabled=False)
    await cache.set("/dashboard/status", ["x"])

    assert await cache.get("/dashboard/status") is None
