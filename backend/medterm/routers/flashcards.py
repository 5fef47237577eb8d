"""
Flashcard catalog and review basket.

Every catalog read rebuilds the user's catalog from their current terms and
phrases, so cards always reflect the latest edits.
"""
import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from medterm.db.sqlite import get_db
from medterm.models.flashcard import BasketAddRequest, BasketResponse, CatalogResponse
from medterm.models.user import User
from medterm.routers.deps import get_current_user, get_desk
from medterm.study.desk import StudyDesk, UnknownCardError
from medterm.study.sources import DbContentSource

router = APIRouter()


def _basket(desk: StudyDesk) -> BasketResponse:
    return BasketResponse(items=desk.basket.cards, total=len(desk.basket))


@router.get("/catalog", response_model=CatalogResponse)
async def catalog(
    search: str = "",
    category: list[str] = Query(default=[]),
    user: User = Depends(get_current_user),
    desk: StudyDesk = Depends(get_desk),
    db: aiosqlite.Connection = Depends(get_db),
):
    built = await desk.refresh(DbContentSource(db, user.id))
    items = desk.browse(search, category)
    return CatalogResponse(items=items, categories=built.categories, total=len(items))


@router.get("/basket", response_model=BasketResponse)
async def get_basket(desk: StudyDesk = Depends(get_desk)):
    return _basket(desk)


@router.post("/basket", response_model=BasketResponse)
async def add_to_basket(
    body: BasketAddRequest,
    user: User = Depends(get_current_user),
    desk: StudyDesk = Depends(get_desk),
    db: aiosqlite.Connection = Depends(get_db),
):
    await desk.refresh(DbContentSource(db, user.id))
    try:
        desk.add_to_basket(body.card_ids)
    except UnknownCardError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _basket(desk)


@router.delete("/basket", response_model=BasketResponse)
async def clear_basket(desk: StudyDesk = Depends(get_desk)):
    desk.basket.clear()
    return _basket(desk)


@router.delete("/basket/{card_id}", response_model=BasketResponse)
async def remove_from_basket(card_id: str, desk: StudyDesk = Depends(get_desk)):
    desk.basket.remove(card_id)
    return _basket(desk)
