import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Response

from medterm.config import settings
from medterm.db.sqlite import get_db, get_user_credentials
from medterm.models.user import LoginRequest, LoginResponse, User
from medterm.routers.deps import get_current_user
from medterm.services import desk_registry
from medterm.services.auth import create_access_token, verify_password

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest, response: Response, db: aiosqlite.Connection = Depends(get_db)
):
    found = await get_user_credentials(db, body.username)
    if found is None or not verify_password(found[1], body.password):
        logger.info("Failed login for %r", body.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    user = found[0]
    token = create_access_token(user)
    response.set_cookie(
        settings.token_cookie_name,
        token,
        max_age=settings.jwt_expire_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
    )
    logger.info("User %s logged in", user.username)
    return LoginResponse(user=user, access_token=token)


@router.post("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    desk_registry.close_desk(user.id)
    response.delete_cookie(settings.token_cookie_name)
    return {"message": "Logged out"}


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
    return user
