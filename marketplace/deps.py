# marketplace/deps.py
from typing import AsyncIterator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .context import AppContext
from .errors import Unauthenticated
from .repositories import ProfileRepository
from .tables import Profile

# ids are 64-bit signed integers in every supported store
MAX_ID = 2**63 - 1


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_session(ctx: AppContext = Depends(get_context)) -> AsyncIterator[AsyncSession]:
    async with ctx.store.session() as session:
        yield session


async def get_profile(
    profile_id: Optional[str] = Header(default=None, convert_underscores=False),
    ctx: AppContext = Depends(get_context),
) -> Profile:
    """Resolve the caller from the ``profile_id`` header or reject with 401."""
    try:
        caller_id = int((profile_id or "").strip(), 10)
    except ValueError:
        raise Unauthenticated("Missing or malformed profile_id header")
    if not 1 <= caller_id <= MAX_ID:
        raise Unauthenticated(f"Unknown profile {profile_id}")
    async with ctx.store.session() as session:
        profile = await ProfileRepository(session).get(caller_id)
    if profile is None:
        raise Unauthenticated(f"Unknown profile {profile_id}")
    return profile
