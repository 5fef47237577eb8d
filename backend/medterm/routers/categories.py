import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from medterm.db.sqlite import (
    create_category,
    delete_category,
    get_category,
    get_db,
    list_categories,
    update_category,
)
from medterm.models.category import Category, CategoryCreate, CategoryUpdate
from medterm.models.user import User
from medterm.routers.deps import get_current_user

router = APIRouter()


@router.get("", response_model=list[Category])
async def list_cats(
    user: User = Depends(get_current_user), db: aiosqlite.Connection = Depends(get_db)
):
    return await list_categories(db, user.id)


@router.post("", response_model=Category, status_code=201)
async def create_cat(
    body: CategoryCreate,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    return await create_category(db, user.id, body.model_copy(update={"name": body.name.strip()}))


@router.get("/{category_id}", response_model=Category)
async def get_cat(
    category_id: str,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    category = await get_category(db, user.id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.put("/{category_id}", response_model=Category)
async def update_cat(
    category_id: str,
    body: CategoryUpdate,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    if not body.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    category = await update_category(
        db, user.id, category_id, body.model_copy(update={"name": body.name.strip()})
    )
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.delete("/{category_id}", status_code=204)
async def delete_cat(
    category_id: str,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    deleted = await delete_category(db, user.id, category_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Category not found")
