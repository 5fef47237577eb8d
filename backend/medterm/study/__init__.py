from medterm.study.basket import JsonFileBasketStore, MemoryBasketStore, ReviewBasket
from medterm.study.catalog import Catalog, build_catalog, filter_cards, load_catalog
from medterm.study.desk import StudyDesk
from medterm.study.progress import progress_percent, round_label, snapshot
from medterm.study.session import (
    EmptyCardSetError,
    StudyError,
    StudySession,
    StudySessionEngine,
)

__all__ = [
    "Catalog",
    "EmptyCardSetError",
    "JsonFileBasketStore",
    "MemoryBasketStore",
    "ReviewBasket",
    "StudyDesk",
    "StudyError",
    "StudySession",
    "StudySessionEngine",
    "build_catalog",
    "filter_cards",
    "load_catalog",
    "progress_percent",
    "round_label",
    "snapshot",
]
