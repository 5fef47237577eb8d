"""
Medical terms router.

Endpoints:
  GET    /api/terms          own terms, newest first
  POST   /api/terms          create (term and meaning required)
  POST   /api/terms/import   JSON bulk import
  GET    /api/terms/{id}     single term
  PUT    /api/terms/{id}     replace fields and, when given, category links
  DELETE /api/terms/{id}     delete
"""
import logging
from typing import Any

import aiosqlite
from fastapi import APIRouter, Body, Depends, HTTPException

from medterm.db.sqlite import (
    create_term,
    delete_term,
    get_db,
    get_term,
    list_terms,
    missing_category_ids,
    term_text_exists,
    update_term,
)
from medterm.models.imports import ImportResult
from medterm.models.term import MedicalTerm, TermCreate, TermUpdate
from medterm.models.user import User
from medterm.routers._imports import parse_import_body
from medterm.routers.deps import get_current_user
from medterm.services.importer import import_terms

logger = logging.getLogger(__name__)
router = APIRouter()


async def _check_categories(
    db: aiosqlite.Connection, user_id: str, category_ids: list[str] | None
) -> None:
    if category_ids and await missing_category_ids(db, user_id, category_ids):
        raise HTTPException(status_code=400, detail="Unknown category")


@router.get("", response_model=list[MedicalTerm])
async def list_all(
    user: User = Depends(get_current_user), db: aiosqlite.Connection = Depends(get_db)
):
    return await list_terms(db, user.id)


@router.post("", response_model=MedicalTerm, status_code=201)
async def create(
    body: TermCreate,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    body = body.model_copy(update={"term": body.term.strip(), "meaning": body.meaning.strip()})
    if not body.term or not body.meaning:
        raise HTTPException(status_code=400, detail="Term and meaning are required")
    await _check_categories(db, user.id, body.category_ids)
    term = await create_term(db, user.id, body)
    logger.info("User %s created term %r", user.username, term.term)
    return term


@router.post("/import", response_model=ImportResult)
async def import_json(
    payload: Any = Body(...),
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    request = parse_import_body(payload)
    return await import_terms(db, user.id, request.items, request.global_categories)


@router.get("/{term_id}", response_model=MedicalTerm)
async def get_one(
    term_id: str,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    term = await get_term(db, user.id, term_id)
    if not term:
        raise HTTPException(status_code=404, detail="Term not found")
    return term


@router.put("/{term_id}", response_model=MedicalTerm)
async def update(
    term_id: str,
    body: TermUpdate,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    body = body.model_copy(update={"term": body.term.strip(), "meaning": body.meaning.strip()})
    if not body.term or not body.meaning:
        raise HTTPException(status_code=400, detail="Term and meaning are required")
    if not await get_term(db, user.id, term_id):
        raise HTTPException(status_code=404, detail="Term not found")
    if await term_text_exists(db, user.id, body.term, exclude_id=term_id):
        raise HTTPException(status_code=409, detail="Term already exists")
    await _check_categories(db, user.id, body.category_ids)

    term = await update_term(db, user.id, term_id, body)
    if not term:
        raise HTTPException(status_code=404, detail="Term not found")
    return term


@router.delete("/{term_id}", status_code=204)
async def delete(
    term_id: str,
    user: User = Depends(get_current_user),
    db: aiosqlite.Connection = Depends(get_db),
):
    deleted = await delete_term(db, user.id, term_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Term not found")
