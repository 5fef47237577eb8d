from __future__ import annotations

from typing import Protocol

import aiosqlite

from medterm.db.sqlite import list_categories, list_phrases, list_terms
from medterm.models.category import Category
from medterm.models.phrase import MedicalPhrase
from medterm.models.term import MedicalTerm


class ContentSource(Protocol):
    async def fetch_terms(self) -> list[MedicalTerm]: ...

    async def fetch_phrases(self) -> list[MedicalPhrase]: ...

    async def fetch_categories(self) -> list[Category]: ...


class DbContentSource:
    """Reads one user's content straight from the local SQLite store."""

    def __init__(self, db: aiosqlite.Connection, user_id: str) -> None:
        self.db = db
        self.user_id = user_id

    async def fetch_terms(self) -> list[MedicalTerm]:
        return await list_terms(self.db, self.user_id)

    async def fetch_phrases(self) -> list[MedicalPhrase]:
        return await list_phrases(self.db, self.user_id)

    async def fetch_categories(self) -> list[Category]:
        return await list_categories(self.db, self.user_id)
