from __future__ import annotations

from collections.abc import Iterable

from medterm.models.flashcard import FlashcardItem
from medterm.study.basket import ReviewBasket
from medterm.study.catalog import Catalog, filter_cards, load_catalog
from medterm.study.session import StudyError, StudySession, StudySessionEngine
from medterm.study.sources import ContentSource


class UnknownCardError(StudyError):
    def __init__(self, card_ids: list[str]) -> None:
        self.card_ids = card_ids
        super().__init__(f"Unknown card ids: {', '.join(card_ids)}")


class StudyDesk:
    """One user's study workspace: the latest catalog, the basket and the session engine."""

    def __init__(self, basket: ReviewBasket, engine: StudySessionEngine) -> None:
        self.basket = basket
        self.engine = engine
        self.catalog = Catalog()

    async def refresh(self, source: ContentSource) -> Catalog:
        self.catalog = await load_catalog(source)
        return self.catalog

    def browse(self, search: str = "", category_ids: Iterable[str] = ()) -> list[FlashcardItem]:
        return filter_cards(self.catalog.cards, search, category_ids)

    def resolve(self, card_ids: Iterable[str]) -> list[FlashcardItem]:
        """Look up catalog cards by id, keeping the requested order."""
        index = self.catalog.by_id()
        ids = list(dict.fromkeys(card_ids))
        missing = [cid for cid in ids if cid not in index]
        if missing:
            raise UnknownCardError(missing)
        return [index[cid] for cid in ids]

    def add_to_basket(self, card_ids: Iterable[str]) -> int:
        return self.basket.add_all(self.resolve(card_ids))

    def start_from_basket(self) -> StudySession:
        return self.engine.start(self.basket.cards)

    def start_from_catalog(
        self,
        card_ids: Iterable[str] | None = None,
        search: str = "",
        category_ids: Iterable[str] = (),
    ) -> StudySession:
        if card_ids is not None:
            return self.engine.start(self.resolve(card_ids))
        return self.engine.start(self.browse(search, category_ids))

    def end(self) -> None:
        self.engine.end()
