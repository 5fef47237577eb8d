import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from medterm.db.sqlite import create_user, get_db, list_users_with_counts, user_exists
from medterm.models.user import User, UserCreate, UserWithCounts
from medterm.routers.deps import require_admin
from medterm.services.auth import hash_password

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[UserWithCounts])
async def list_all_users(
    _admin: User = Depends(require_admin), db: aiosqlite.Connection = Depends(get_db)
):
    return await list_users_with_counts(db)


@router.post("", response_model=User, status_code=201)
async def create_new_user(
    body: UserCreate,
    admin: User = Depends(require_admin),
    db: aiosqlite.Connection = Depends(get_db),
):
    if not body.username or not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Username, email and password are required")
    if await user_exists(db, body.username, body.email):
        raise HTTPException(status_code=400, detail="Username or email already exists")

    user = await create_user(db, body, hash_password(body.password))
    logger.info("Admin %s created user %s (%s)", admin.username, user.username, user.role.value)
    return user
