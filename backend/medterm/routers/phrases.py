import logging
from typing import Any

import aiosqlite
from fastapi import APIRouter, Body, Depends, HTTPException

from medterm.db.sqlite import (
    create_phrase,
    delete_phrase,
    get_db,
    get_phrase,
    list_phrases,
    missing_category_ids,
    phrase_text_exists,
    update_phrase,
)
from medterm.models.imports import ImportResult
from medterm.models.phrase import MedicalPhrase, PhraseCreate, PhraseUpdate
from medterm.models.user import User
from medterm.routers._imports import parse_import_body
from medterm.routers.deps import get_current_user
from medterm.services.importer import import_phrases

logger = logging.getLogger(__name__)
router = APIRouter()


async def _check_categories(
    db: aiosqlite.Connection, user_id: str, category_ids: list[str] | None
) -> None:
    if category_ids and await missing_category_ids(db, user_id, category_ids):
        raise HTTPException(status_code=400, detail="Unknown category")


@router.get("", response_model=list[MedicalPhrase])
async def list_all(
    user: User = Depends(get_current_user), db: aiosqlite.Connection = Depends(get_db)
):
    return await list_phrases(db, user.id)


@router.post("", response_model=MedicalPhrase, status_code=201)
async def create(
    body: PhraseCreate,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    body = body.model_copy(
        update={"phrase": body.phrase.strip(), "explanation": body.explanation.strip()}
    )
    if not body.phrase or not body.explanation:
        raise HTTPException(status_code=400, detail="Phrase and explanation are required")
    await _check_categories(db, user.id, body.category_ids)
    phrase = await create_phrase(db, user.id, body)
    logger.info("User %s created phrase %r", user.username, phrase.phrase)
    return phrase


@router.post("/import", response_model=ImportResult)
async def import_json(
    payload: Any = Body(...),
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    request = parse_import_body(payload)
    return await import_phrases(db, user.id, request.items, request.global_categories)


@router.get("/{phrase_id}", response_model=MedicalPhrase)
async def get_one(
    phrase_id: str,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    phrase = await get_phrase(db, user.id, phrase_id)
    if not phrase:
        raise HTTPException(status_code=404, detail="Phrase not found")
    return phrase


@router.put("/{phrase_id}", response_model=MedicalPhrase)
async def update(
    phrase_id: str,
    body: PhraseUpdate,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    body = body.model_copy(
        update={"phrase": body.phrase.strip(), "explanation": body.explanation.strip()}
    )
    if not body.phrase or not body.explanation:
        raise HTTPException(status_code=400, detail="Phrase and explanation are required")
    if not await get_phrase(db, user.id, phrase_id):
        raise HTTPException(status_code=404, detail="Phrase not found")
    if await phrase_text_exists(db, user.id, body.phrase, exclude_id=phrase_id):
        raise HTTPException(status_code=409, detail="Phrase already exists")
    await _check_categories(db, user.id, body.category_ids)

    phrase = await update_phrase(db, user.id, phrase_id, body)
    if not phrase:
        raise HTTPException(status_code=404, detail="Phrase not found")
    return phrase


@router.delete("/{phrase_id}", status_code=204)
async def delete(
    phrase_id: str,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    deleted = await delete_phrase(db, user.id, phrase_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Phrase not found")
