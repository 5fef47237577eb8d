import json

from medterm.study.basket import BASKET_KEY, JsonFileBasketStore, MemoryBasketStore, ReviewBasket


class FailingStore:
    def load(self):
        raise OSError("disk unavailable")

    def save(self, cards):
        raise OSError("disk full")


def test_add_is_idempotent(make_card):
    store = MemoryBasketStore()
    basket = ReviewBasket(store)
    card = make_card("1")

    assert basket.add(card)
    assert not basket.add(card)
    assert len(basket) == 1
    assert store.saved == [card]


def test_remove_absent_id_is_noop(make_card):
    store = MemoryBasketStore([make_card("1")])
    basket = ReviewBasket(store)
    store.saved = []

    assert not basket.remove("term-404")
    assert len(basket) == 1
    assert store.saved == []


def test_add_all_skips_duplicates_and_keeps_order(make_card):
    basket = ReviewBasket()
    basket.add(make_card("2"))

    added = basket.add_all([make_card("1"), make_card("2"), make_card("1"), make_card("3")])

    assert added == 2
    assert [c.id for c in basket.cards] == ["term-2", "term-1", "term-3"]


def test_clear_and_contains(make_card):
    basket = ReviewBasket()
    basket.add(make_card("1"))
    assert basket.contains("term-1")
    assert "term-1" in basket

    basket.clear()
    assert len(basket) == 0
    assert not basket.contains("term-1")


def test_store_failures_are_reported_not_raised(make_card):
    errors = []
    basket = ReviewBasket(FailingStore(), on_persist_error=errors.append)

    assert len(basket) == 0
    assert basket.add(make_card("1"))
    assert basket.contains("term-1")
    assert len(errors) == 1
    assert isinstance(errors[0], OSError)


def test_json_store_round_trip(tmp_path, make_card):
    path = tmp_path / "baskets" / "u1.json"
    basket = ReviewBasket(JsonFileBasketStore(path))
    basket.add_all([make_card("1", categories=["cardio"]), make_card("2")])

    data = json.loads(path.read_text(encoding="utf-8"))
    assert [item["id"] for item in data[BASKET_KEY]] == ["term-1", "term-2"]

    reloaded = ReviewBasket(JsonFileBasketStore(path))
    assert reloaded.cards == basket.cards
    assert reloaded.cards[0].categories[0].id == "cardio"


def test_json_store_missing_or_malformed_file(tmp_path):
    path = tmp_path / "basket.json"
    assert ReviewBasket(JsonFileBasketStore(path)).cards == []

    path.write_text("{not json", encoding="utf-8")
    assert ReviewBasket(JsonFileBasketStore(path)).cards == []

    path.write_text(json.dumps({BASKET_KEY: [{"id": "term-1"}]}), encoding="utf-8")
    assert ReviewBasket(JsonFileBasketStore(path)).cards == []
