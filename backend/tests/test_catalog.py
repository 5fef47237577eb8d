import asyncio

from medterm.models.category import Category
from medterm.models.flashcard import SourceType
from medterm.models.phrase import MedicalPhrase
from medterm.models.term import MedicalTerm
from medterm.study.catalog import build_catalog, filter_cards, load_catalog

STAMP = "2024-01-01 00:00:00"

CARDIO = Category(
    id="c1", name="Cardiology", color="#dc2626", created_by="u", created_at=STAMP, updated_at=STAMP
)


def term(tid, text, meaning, categories=()):
    return MedicalTerm(
        id=tid,
        term=text,
        meaning=meaning,
        pronunciation=f"/{text.lower()}/",
        categories=list(categories),
        created_by="u",
        created_at=STAMP,
        updated_at=STAMP,
    )


def phrase(pid, text, explanation):
    return MedicalPhrase(
        id=pid,
        phrase=text,
        explanation=explanation,
        created_by="u",
        created_at=STAMP,
        updated_at=STAMP,
    )


class StaticSource:
    def __init__(self, terms=(), phrases=(), categories=(), failing=()):
        self.data = {"terms": list(terms), "phrases": list(phrases), "categories": list(categories)}
        self.failing = set(failing)

    async def _fetch(self, name):
        if name in self.failing:
            raise ConnectionError(f"{name} unavailable")
        return self.data[name]

    async def fetch_terms(self):
        return await self._fetch("terms")

    async def fetch_phrases(self):
        return await self._fetch("phrases")

    async def fetch_categories(self):
        return await self._fetch("categories")


def test_build_catalog_terms_then_phrases():
    cards = build_catalog(
        [term("1", "Hypertension", "High blood pressure", [CARDIO]), term("2", "Arthritis", "Joints")],
        [phrase("9", "MI", "Myocardial Infarction")],
    )

    assert [c.id for c in cards] == ["term-1", "term-2", "phrase-9"]
    first, _, last = cards
    assert first.source_type is SourceType.TERM
    assert (first.front, first.back) == ("Hypertension", "High blood pressure")
    assert first.pronunciation == "/hypertension/"
    assert first.categories[0].name == "Cardiology"
    assert last.source_type is SourceType.PHRASE
    assert last.pronunciation is None


def test_load_catalog_tolerates_failed_source():
    source = StaticSource(
        terms=[term("1", "Hypertension", "High blood pressure")],
        phrases=[phrase("9", "MI", "Myocardial Infarction")],
        categories=[CARDIO],
        failing={"terms"},
    )

    catalog = asyncio.run(load_catalog(source))

    assert [c.id for c in catalog.cards] == ["phrase-9"]
    assert catalog.categories == [CARDIO]


def test_filter_cards_by_text_and_category():
    cards = build_catalog(
        [term("1", "Hypertension", "High blood pressure", [CARDIO]), term("2", "Arthritis", "Joints")],
        [phrase("9", "MI", "Heart attack")],
    )

    assert [c.id for c in filter_cards(cards, "BLOOD")] == ["term-1"]
    assert [c.id for c in filter_cards(cards, "heart")] == ["phrase-9"]
    assert [c.id for c in filter_cards(cards, category_ids=["c1"])] == ["term-1"]
    assert filter_cards(cards, "heart", ["c1"]) == []
    assert len(filter_cards(cards)) == 3
