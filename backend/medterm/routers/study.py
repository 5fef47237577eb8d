"""
Study session router.

Endpoints:
  POST   /api/study/start     start a pass over the basket or the catalog
  GET    /api/study/session   current session snapshot
  POST   /api/study/reveal    show the answer
  POST   /api/study/grade     record knew / didn't know
  POST   /api/study/advance   skip the post-grade pause
  DELETE /api/study/session   end the session

Transitions that the current state does not allow are answered with
``accepted: false`` and the unchanged snapshot.
"""
import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from medterm.db.sqlite import get_db
from medterm.models.flashcard import (
    GradeRequest,
    SessionSnapshot,
    StudyActionResult,
    StudyStartRequest,
)
from medterm.models.user import User
from medterm.routers.deps import get_current_user, get_desk
from medterm.study.desk import StudyDesk
from medterm.study.progress import snapshot
from medterm.study.session import StudyError
from medterm.study.sources import DbContentSource

logger = logging.getLogger(__name__)
router = APIRouter()


def _result(desk: StudyDesk, accepted: bool) -> StudyActionResult:
    session = desk.engine.session
    return StudyActionResult(
        accepted=accepted, session=snapshot(session) if session else None
    )


@router.post("/start", response_model=SessionSnapshot, status_code=201)
async def start(
    body: StudyStartRequest,
    user: User = Depends(get_current_user),
    desk: StudyDesk = Depends(get_desk),
    db: aiosqlite.Connection = Depends(get_db),
):
    try:
        if body.source == "basket":
            session = desk.start_from_basket()
        else:
            await desk.refresh(DbContentSource(db, user.id))
            session = desk.start_from_catalog(body.card_ids, body.search, body.category_ids)
    except StudyError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return snapshot(session)


@router.get("/session", response_model=SessionSnapshot)
async def current(desk: StudyDesk = Depends(get_desk)):
    session = desk.engine.session
    if session is None:
        raise HTTPException(status_code=404, detail="No active study session")
    return snapshot(session)


@router.post("/reveal", response_model=StudyActionResult)
async def reveal(desk: StudyDesk = Depends(get_desk)):
    return _result(desk, desk.engine.reveal())


@router.post("/grade", response_model=StudyActionResult)
async def grade(body: GradeRequest, desk: StudyDesk = Depends(get_desk)):
    return _result(desk, desk.engine.grade(body.knew_answer))


@router.post("/advance", response_model=StudyActionResult)
async def advance(desk: StudyDesk = Depends(get_desk)):
    return _result(desk, desk.engine.flush())


@router.delete("/session", status_code=204)
async def end(desk: StudyDesk = Depends(get_desk)):
    desk.end()
