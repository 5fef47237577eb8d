from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Protocol

from medterm.models.flashcard import FlashcardItem

logger = logging.getLogger(__name__)

BASKET_KEY = "flashcard-basket"


class BasketStore(Protocol):
    def load(self) -> list[FlashcardItem]: ...

    def save(self, cards: list[FlashcardItem]) -> None: ...


class MemoryBasketStore:
    def __init__(self, cards: Iterable[FlashcardItem] = ()) -> None:
        self.saved: list[FlashcardItem] = list(cards)

    def load(self) -> list[FlashcardItem]:
        return list(self.saved)

    def save(self, cards: list[FlashcardItem]) -> None:
        self.saved = list(cards)


class JsonFileBasketStore:
    """Keeps the basket in a JSON file, under a fixed key."""

    def __init__(self, path: Path, key: str = BASKET_KEY) -> None:
        self.path = path
        self.key = key

    def load(self) -> list[FlashcardItem]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return [FlashcardItem.model_validate(item) for item in data.get(self.key) or []]

    def save(self, cards: list[FlashcardItem]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {self.key: [card.model_dump(mode="json") for card in cards]}
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)


class ReviewBasket:
    """User-curated cards queued for the next study pass.

    Ids are unique and insertion order is kept. The whole basket is written
    to the store after every mutation; storage errors are logged and passed
    to ``on_persist_error`` but never raised, so the in-memory change always
    stands.
    """

    def __init__(
        self,
        store: BasketStore | None = None,
        on_persist_error: Callable[[Exception], None] | None = None,
    ) -> None:
        self._store = store or MemoryBasketStore()
        self._on_persist_error = on_persist_error
        self._cards: dict[str, FlashcardItem] = {}
        for card in self._load():
            self._cards.setdefault(card.id, card)

    @property
    def cards(self) -> list[FlashcardItem]:
        return list(self._cards.values())

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[FlashcardItem]:
        return iter(list(self._cards.values()))

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def contains(self, card_id: str) -> bool:
        return card_id in self._cards

    def add(self, card: FlashcardItem) -> bool:
        if card.id in self._cards:
            return False
        self._cards[card.id] = card
        self._persist()
        return True

    def add_all(self, cards: Iterable[FlashcardItem]) -> int:
        added = 0
        for card in cards:
            if card.id not in self._cards:
                self._cards[card.id] = card
                added += 1
        if added:
            self._persist()
        return added

    def remove(self, card_id: str) -> bool:
        if self._cards.pop(card_id, None) is None:
            return False
        self._persist()
        return True

    def clear(self) -> None:
        self._cards.clear()
        self._persist()

    def _load(self) -> list[FlashcardItem]:
        try:
            return self._store.load()
        except Exception as e:
            logger.warning("Discarding unreadable basket: %s", e)
            return []

    def _persist(self) -> None:
        try:
            self._store.save(self.cards)
        except Exception as e:
            logger.warning("Basket save failed: %s", e)
            if self._on_persist_error is not None:
                self._on_persist_error(e)
