"""Process-local cache of rendered list views, keyed by dashboard path."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from loguru import logger


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _Entry:
    value: Any
    stored_at: datetime


class PathCache:
    """List payloads cached per path until they expire or are revalidated.

    ``revalidate_path("/dashboard/product")`` drops the list entry and every
    entry nested under it, so detail views are refreshed together with their
    list.
    """

    def __init__(
        self,
        *,
        ttl_seconds: int = 300,
        enabled: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self.enabled = enabled

    async def get(self, path: str) -> Any | None:
        if not self.enabled:
            return None
        async with self._lock:
            entry = self._entries.get(path)
            if entry is None:
                return None
            if self._clock() - entry.stored_at > self._ttl:
                self._entries.pop(path, None)
                return None
        logger.debug("List view served from cache", path=path)
        return entry.value

    async def set(self, path: str, value: Any) -> None:
        if not self.enabled:
            return
        async with self._lock:
            self._entries[path] = _Entry(value=value, stored_at=self._clock())

    async def revalidate_path(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        async with self._lock:
            dropped = [key for key in self._entries if key == path or key.startswith(prefix)]
            for key in dropped:
                del self._entries[key]
        logger.info("List view revalidated", path=path, dropped=len(dropped))
        return dropped

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()


__all__ = ["PathCache"]
