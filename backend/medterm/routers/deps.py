"""
Shared route dependencies: authentication and the per-user study desk.
"""
from __future__ import annotations

import aiosqlite
from fastapi import Depends, HTTPException, Request

from medterm.config import settings
from medterm.db.sqlite import get_db, get_user
from medterm.models.user import Role, User
from medterm.services import desk_registry
from medterm.services.auth import decode_access_token
from medterm.study.desk import StudyDesk
from medterm.study.scheduler import AsyncioScheduler, Scheduler


def get_token(request: Request) -> str | None:
    """Bearer header first, then the auth cookie."""
    auth = request.headers.get("Authorization", "")
    scheme, _, credentials = auth.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(settings.token_cookie_name)


async def get_current_user(
    token: str | None = Depends(get_token),
    db: aiosqlite.Connection = Depends(get_db),
) -> User:
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = await get_user(db, payload.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role is not Role.ADMIN:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user


def get_scheduler() -> Scheduler:
    return AsyncioScheduler()


async def get_desk(
    user: User = Depends(get_current_user),
    scheduler: Scheduler = Depends(get_scheduler),
) -> StudyDesk:
    return desk_registry.open_desk(user.id, scheduler)
