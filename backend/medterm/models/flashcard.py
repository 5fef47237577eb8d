from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from medterm.models.category import Category


class SourceType(str, Enum):
    TERM = "term"
    PHRASE = "phrase"


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_REVEAL = "awaiting_reveal"
    ANSWER_SHOWN = "answer_shown"
    TRANSITIONING = "transitioning"
    COMPLETE = "complete"


class CategoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color: str


class FlashcardItem(BaseModel):
    """One reviewable card built from a term or a phrase. Equal by ``id``."""

    model_config = ConfigDict(frozen=True)

    id: str  # "{source_type}-{source_id}"
    source_type: SourceType
    front: str
    back: str
    pronunciation: str | None = None
    categories: tuple[CategoryRef, ...] = ()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FlashcardItem):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)


class CatalogResponse(BaseModel):
    items: list[FlashcardItem]
    categories: list[Category]
    total: int


class BasketResponse(BaseModel):
    items: list[FlashcardItem]
    total: int


class BasketAddRequest(BaseModel):
    card_ids: list[str]


class StudyStartRequest(BaseModel):
    source: Literal["basket", "catalog"] = "basket"
    card_ids: list[str] | None = None  # subset of the catalog
    search: str = ""
    category_ids: list[str] = []


class GradeRequest(BaseModel):
    knew_answer: bool


class CardView(BaseModel):
    id: str
    source_type: SourceType
    front: str
    back: str | None  # hidden until the answer is revealed
    pronunciation: str | None = None
    categories: list[CategoryRef] = []


class SessionSnapshot(BaseModel):
    id: str
    state: SessionState
    current_card: CardView | None
    show_answer: bool
    is_transitioning: bool
    total_cards: int
    remaining_count: int
    correct_cards: int
    correct_count: int
    total_reviews: int
    progress_percent: float
    round_label: str


class StudyActionResult(BaseModel):
    accepted: bool
    session: SessionSnapshot | None
