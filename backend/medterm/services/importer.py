"""
JSON bulk import for terms and phrases.

For each item with the required fields:
  1. Merge the request-wide category names with the item's own (deduplicated)
  2. Find each category by name, creating missing ones with a palette colour
  3. Insert the term/phrase with those category links

Items missing a required field, or duplicating existing text, are skipped.
"""
from __future__ import annotations

import logging
import random
from typing import Any

import aiosqlite

from medterm.db.sqlite import (
    create_category,
    create_phrase,
    create_term,
    find_category_by_name,
    phrase_text_exists,
    term_text_exists,
)
from medterm.models.category import CategoryCreate
from medterm.models.imports import ImportResult
from medterm.models.phrase import MedicalPhrase, PhraseCreate
from medterm.models.term import MedicalTerm, TermCreate

logger = logging.getLogger(__name__)

PALETTE = [
    "#3B82F6",
    "#EF4444",
    "#10B981",
    "#F59E0B",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#84CC16",
    "#F97316",
    "#6366F1",
]


def random_color() -> str:
    return random.choice(PALETTE)


def _text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    return value.strip() if isinstance(value, str) else ""


def merge_category_names(*groups: Any) -> list[str]:
    """Union of the name lists in order, trimmed; non-lists and non-strings are ignored."""
    names: dict[str, None] = {}
    for group in groups:
        if not isinstance(group, list):
            continue
        for name in group:
            if isinstance(name, str) and name.strip():
                names.setdefault(name.strip(), None)
    return list(names)


async def _resolve_categories(
    db: aiosqlite.Connection, user_id: str, names: list[str], cache: dict[str, str]
) -> list[str]:
    ids = []
    for name in names:
        if name not in cache:
            category = await find_category_by_name(db, user_id, name)
            if category is None:
                category = await create_category(
                    db, user_id, CategoryCreate(name=name, color=random_color())
                )
                logger.info("Import created category %r for user %s", name, user_id)
            cache[name] = category.id
        ids.append(cache[name])
    return ids


async def import_terms(
    db: aiosqlite.Connection,
    user_id: str,
    items: list[Any],
    global_categories: list[Any] | None = None,
) -> ImportResult:
    created: list[MedicalTerm] = []
    skipped = 0
    cache: dict[str, str] = {}

    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        term, meaning = _text(item, "term"), _text(item, "meaning")
        if not term or not meaning or await term_text_exists(db, user_id, term):
            skipped += 1
            continue

        names = merge_category_names(global_categories, item.get("categories"))
        category_ids = await _resolve_categories(db, user_id, names, cache)
        created.append(
            await create_term(
                db,
                user_id,
                TermCreate(
                    term=term,
                    meaning=meaning,
                    pronunciation=_text(item, "pronunciation") or None,
                    category_ids=category_ids,
                ),
            )
        )

    logger.info("Imported %d terms for user %s (%d skipped)", len(created), user_id, skipped)
    return ImportResult(
        imported=len(created),
        skipped=skipped,
        message=f"{len(created)} terms imported successfully",
        items=created,
    )


async def import_phrases(
    db: aiosqlite.Connection,
    user_id: str,
    items: list[Any],
    global_categories: list[Any] | None = None,
) -> ImportResult:
    created: list[MedicalPhrase] = []
    skipped = 0
    cache: dict[str, str] = {}

    for item in items:
        if not isinstance(item, dict):
            skipped += 1
            continue
        phrase, explanation = _text(item, "phrase"), _text(item, "explanation")
        if not phrase or not explanation or await phrase_text_exists(db, user_id, phrase):
            skipped += 1
            continue

        names = merge_category_names(global_categories, item.get("categories"))
        category_ids = await _resolve_categories(db, user_id, names, cache)
        created.append(
            await create_phrase(
                db,
                user_id,
                PhraseCreate(phrase=phrase, explanation=explanation, category_ids=category_ids),
            )
        )

    logger.info("Imported %d phrases for user %s (%d skipped)", len(created), user_id, skipped)
    return ImportResult(
        imported=len(created),
        skipped=skipped,
        message=f"{len(created)} phrases imported successfully",
        items=created,
    )
