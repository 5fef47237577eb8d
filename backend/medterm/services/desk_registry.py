from __future__ import annotations

import logging
from pathlib import Path

from medterm.config import settings
from medterm.study.basket import JsonFileBasketStore, ReviewBasket
from medterm.study.desk import StudyDesk
from medterm.study.scheduler import Scheduler
from medterm.study.session import StudySessionEngine

logger = logging.getLogger(__name__)

_open_desks: dict[str, StudyDesk] = {}


def _basket_path(user_id: str) -> Path:
    return settings.data_dir / settings.baskets_dirname / f"{user_id}.json"


def open_desk(user_id: str, scheduler: Scheduler) -> StudyDesk:
    """Return the user's desk, creating it (and loading the saved basket) on first use."""
    desk = _open_desks.get(user_id)
    if desk is None:
        store = JsonFileBasketStore(_basket_path(user_id), key=settings.basket_key)
        desk = StudyDesk(
            basket=ReviewBasket(store),
            engine=StudySessionEngine(
                scheduler, transition_delay=settings.transition_delay_seconds
            ),
        )
        _open_desks[user_id] = desk
        logger.info("Opened study desk for user %s (%d cards in basket)", user_id, len(desk.basket))
    return desk


def close_desk(user_id: str) -> None:
    desk = _open_desks.pop(user_id, None)
    if desk is not None:
        desk.end()


def close_all() -> None:
    for user_id in list(_open_desks):
        close_desk(user_id)
