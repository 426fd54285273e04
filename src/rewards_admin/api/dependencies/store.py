from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rewards_admin.db.session import get_session
from rewards_admin.db.store import Store
from rewards_admin.services.actions.cache import PathCache


async def get_store(session: AsyncSession = Depends(get_session)) -> Store:
    return Store(session)


def get_path_cache(request: Request) -> PathCache:
    """List-view cache created by the application lifespan."""

    return request.app.state.path_cache
