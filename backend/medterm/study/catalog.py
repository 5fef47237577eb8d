from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from medterm.models.category import Category
from medterm.models.flashcard import CategoryRef, FlashcardItem, SourceType
from medterm.models.phrase import MedicalPhrase
from medterm.models.term import MedicalTerm
from medterm.study.sources import ContentSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    cards: list[FlashcardItem] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    def by_id(self) -> dict[str, FlashcardItem]:
        return {card.id: card for card in self.cards}


def _refs(categories: Iterable[Category]) -> tuple[CategoryRef, ...]:
    return tuple(CategoryRef(id=c.id, name=c.name, color=c.color) for c in categories)


def term_to_card(term: MedicalTerm) -> FlashcardItem:
    return FlashcardItem(
        id=f"{SourceType.TERM.value}-{term.id}",
        source_type=SourceType.TERM,
        front=term.term,
        back=term.meaning,
        pronunciation=term.pronunciation,
        categories=_refs(term.categories),
    )


def phrase_to_card(phrase: MedicalPhrase) -> FlashcardItem:
    return FlashcardItem(
        id=f"{SourceType.PHRASE.value}-{phrase.id}",
        source_type=SourceType.PHRASE,
        front=phrase.phrase,
        back=phrase.explanation,
        categories=_refs(phrase.categories),
    )


def build_catalog(
    terms: Sequence[MedicalTerm], phrases: Sequence[MedicalPhrase]
) -> list[FlashcardItem]:
    """Terms first, then phrases, each in the order the source returned them."""
    return [term_to_card(t) for t in terms] + [phrase_to_card(p) for p in phrases]


async def load_catalog(source: ContentSource) -> Catalog:
    """Fetch terms, phrases and categories concurrently.

    A source that fails contributes nothing; the rest of the catalog is
    still built.
    """
    results = await asyncio.gather(
        source.fetch_terms(),
        source.fetch_phrases(),
        source.fetch_categories(),
        return_exceptions=True,
    )
    terms, phrases, categories = (
        _or_empty(name, result)
        for name, result in zip(("terms", "phrases", "categories"), results)
    )
    return Catalog(cards=build_catalog(terms, phrases), categories=categories)


def _or_empty(name: str, result: object) -> list:
    if isinstance(result, Exception):
        logger.warning("Could not fetch %s for the flashcard catalog: %s", name, result)
        return []
    if isinstance(result, BaseException):
        raise result
    return list(result)  # type: ignore[call-overload]


def filter_cards(
    cards: Iterable[FlashcardItem],
    search: str = "",
    category_ids: Iterable[str] = (),
) -> list[FlashcardItem]:
    """Case-insensitive text search over both faces, then category filter (any match)."""
    needle = search.strip().lower()
    wanted = set(category_ids)
    result = []
    for card in cards:
        if needle and needle not in card.front.lower() and needle not in card.back.lower():
            continue
        if wanted and not any(c.id in wanted for c in card.categories):
            continue
        result.append(card)
    return result
