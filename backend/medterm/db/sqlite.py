import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from medterm.config import settings
from medterm.models.category import Category, CategoryCreate, CategoryUpdate
from medterm.models.phrase import MedicalPhrase, PhraseCreate, PhraseUpdate
from medterm.models.term import MedicalTerm, TermCreate, TermUpdate
from medterm.models.user import User, UserCreate, UserWithCounts

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS users (
    id            TEXT PRIMARY KEY,
    username      TEXT NOT NULL UNIQUE,
    email         TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    role          TEXT NOT NULL DEFAULT 'user',
    created_at    TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS categories (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    description TEXT,
    color       TEXT NOT NULL DEFAULT '#3B82F6',
    created_by  TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_categories_owner ON categories(created_by);

CREATE TABLE IF NOT EXISTS terms (
    id            TEXT PRIMARY KEY,
    term          TEXT NOT NULL,
    meaning       TEXT NOT NULL,
    pronunciation TEXT,
    created_by    TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    created_at    TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at    TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_terms_owner ON terms(created_by);

CREATE TABLE IF NOT EXISTS term_categories (
    term_id     TEXT NOT NULL REFERENCES terms(id) ON DELETE CASCADE,
    category_id TEXT NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
    PRIMARY KEY (term_id, category_id)
);

CREATE TABLE IF NOT EXISTS phrases (
    id          TEXT PRIMARY KEY,
    phrase      TEXT NOT NULL,
    explanation TEXT NOT NULL,
    created_by  TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    created_at  TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_phrases_owner ON phrases(created_by);

CREATE TABLE IF NOT EXISTS phrase_categories (
    phrase_id   TEXT NOT NULL REFERENCES phrases(id) ON DELETE CASCADE,
    category_id TEXT NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
    PRIMARY KEY (phrase_id, category_id)
);

CREATE TABLE IF NOT EXISTS schema_version (
    version    INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO schema_version(version) VALUES (1);
"""


async def init_sqlite(data_dir: Path) -> None:
    global _db_path
    _db_path = data_dir / settings.sqlite_filename
    async with aiosqlite.connect(_db_path) as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()


@asynccontextmanager
async def connect() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys=ON")
        yield db


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    async with connect() as db:
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def _placeholders(values: list) -> str:
    return ", ".join("?" for _ in values)


# --- Users ---


def _row_to_user(row: aiosqlite.Row) -> User:
    d = dict(row)
    d.pop("password_hash", None)
    return User(**d)


async def create_user(
    db: aiosqlite.Connection, body: UserCreate, password_hash: str
) -> User:
    user_id = str(uuid.uuid4())
    await db.execute(
        """INSERT INTO users (id, username, email, password_hash, role, created_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (user_id, body.username, body.email, password_hash, body.role.value, _now()),
    )
    await db.commit()
    return await get_user(db, user_id)  # type: ignore[return-value]


async def get_user(db: aiosqlite.Connection, user_id: str) -> User | None:
    cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
    row = await cursor.fetchone()
    return _row_to_user(row) if row else None


async def get_user_credentials(
    db: aiosqlite.Connection, username: str
) -> tuple[User, str] | None:
    """Return the user and stored password hash for a login attempt."""
    cursor = await db.execute("SELECT * FROM users WHERE username = ?", (username,))
    row = await cursor.fetchone()
    if row is None:
        return None
    return _row_to_user(row), row["password_hash"]


async def user_exists(db: aiosqlite.Connection, username: str, email: str) -> bool:
    cursor = await db.execute(
        "SELECT 1 FROM users WHERE username = ? OR email = ? LIMIT 1",
        (username, email),
    )
    return await cursor.fetchone() is not None


async def list_users_with_counts(db: aiosqlite.Connection) -> list[UserWithCounts]:
    cursor = await db.execute(
        """SELECT u.id, u.username, u.email, u.role, u.created_at,
                  (SELECT COUNT(*) FROM terms t WHERE t.created_by = u.id) AS term_count,
                  (SELECT COUNT(*) FROM phrases p WHERE p.created_by = u.id) AS phrase_count,
                  (SELECT COUNT(*) FROM categories c WHERE c.created_by = u.id) AS category_count
           FROM users u
           ORDER BY u.created_at DESC, u.rowid DESC"""
    )
    rows = await cursor.fetchall()
    return [UserWithCounts(**dict(r)) for r in rows]


# --- Categories ---


def _row_to_category(row: aiosqlite.Row) -> Category:
    return Category(**dict(row))


async def create_category(
    db: aiosqlite.Connection, user_id: str, body: CategoryCreate
) -> Category:
    category_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO categories
           (id, name, description, color, created_by, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (category_id, body.name, body.description, body.color, user_id, now, now),
    )
    await db.commit()
    return await get_category(db, user_id, category_id)  # type: ignore[return-value]


async def get_category(
    db: aiosqlite.Connection, user_id: str, category_id: str
) -> Category | None:
    cursor = await db.execute(
        "SELECT * FROM categories WHERE id = ? AND created_by = ?",
        (category_id, user_id),
    )
    row = await cursor.fetchone()
    return _row_to_category(row) if row else None


async def find_category_by_name(
    db: aiosqlite.Connection, user_id: str, name: str
) -> Category | None:
    cursor = await db.execute(
        "SELECT * FROM categories WHERE name = ? AND created_by = ?",
        (name, user_id),
    )
    row = await cursor.fetchone()
    return _row_to_category(row) if row else None


async def list_categories(db: aiosqlite.Connection, user_id: str) -> list[Category]:
    cursor = await db.execute(
        "SELECT * FROM categories WHERE created_by = ? ORDER BY created_at DESC, rowid DESC",
        (user_id,),
    )
    rows = await cursor.fetchall()
    return [_row_to_category(r) for r in rows]


async def update_category(
    db: aiosqlite.Connection, user_id: str, category_id: str, body: CategoryUpdate
) -> Category | None:
    # An explicit null clears the description; color is NOT NULL
    fields = body.model_dump(exclude_unset=True)
    if fields.get("color") is None:
        fields.pop("color", None)
    fields["updated_at"] = _now()
    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = list(fields.values()) + [category_id, user_id]

    cursor = await db.execute(
        f"UPDATE categories SET {set_clause} WHERE id = ? AND created_by = ?",  # noqa: S608
        values,
    )
    await db.commit()
    if cursor.rowcount == 0:
        return None
    return await get_category(db, user_id, category_id)


async def delete_category(
    db: aiosqlite.Connection, user_id: str, category_id: str
) -> bool:
    cursor = await db.execute(
        "DELETE FROM categories WHERE id = ? AND created_by = ?",
        (category_id, user_id),
    )
    await db.commit()
    return cursor.rowcount > 0


async def missing_category_ids(
    db: aiosqlite.Connection, user_id: str, category_ids: list[str]
) -> list[str]:
    """Return the ids in ``category_ids`` that the user does not own."""
    wanted = list(dict.fromkeys(category_ids))
    if not wanted:
        return []
    cursor = await db.execute(
        f"SELECT id FROM categories WHERE created_by = ? AND id IN ({_placeholders(wanted)})",  # noqa: S608
        [user_id, *wanted],
    )
    found = {row[0] for row in await cursor.fetchall()}
    return [cid for cid in wanted if cid not in found]


# --- Category links (shared by terms and phrases) ---


async def _set_links(
    db: aiosqlite.Connection,
    link_table: str,
    owner_col: str,
    owner_id: str,
    category_ids: list[str],
) -> None:
    await db.execute(
        f"DELETE FROM {link_table} WHERE {owner_col} = ?",  # noqa: S608
        (owner_id,),
    )
    for category_id in dict.fromkeys(category_ids):
        await db.execute(
            f"INSERT INTO {link_table} ({owner_col}, category_id) VALUES (?, ?)",  # noqa: S608
            (owner_id, category_id),
        )


async def _load_links(
    db: aiosqlite.Connection, link_table: str, owner_col: str, owner_ids: list[str]
) -> dict[str, list[Category]]:
    """Map each owner id to its categories, in link insertion order."""
    if not owner_ids:
        return {}
    cursor = await db.execute(
        f"""SELECT l.{owner_col} AS owner_id, c.*
            FROM {link_table} l
            JOIN categories c ON c.id = l.category_id
            WHERE l.{owner_col} IN ({_placeholders(owner_ids)})
            ORDER BY l.rowid""",  # noqa: S608
        owner_ids,
    )
    links: dict[str, list[Category]] = {oid: [] for oid in owner_ids}
    for row in await cursor.fetchall():
        d = dict(row)
        owner_id = d.pop("owner_id")
        links[owner_id].append(Category(**d))
    return links


# --- Medical terms ---


async def _terms_from_rows(
    db: aiosqlite.Connection, rows: list[aiosqlite.Row]
) -> list[MedicalTerm]:
    ids = [row["id"] for row in rows]
    links = await _load_links(db, "term_categories", "term_id", ids)
    return [MedicalTerm(**dict(r), categories=links[r["id"]]) for r in rows]


async def create_term(
    db: aiosqlite.Connection, user_id: str, body: TermCreate
) -> MedicalTerm:
    term_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO terms
           (id, term, meaning, pronunciation, created_by, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (term_id, body.term, body.meaning, body.pronunciation, user_id, now, now),
    )
    await _set_links(db, "term_categories", "term_id", term_id, body.category_ids)
    await db.commit()
    return await get_term(db, user_id, term_id)  # type: ignore[return-value]


async def get_term(
    db: aiosqlite.Connection, user_id: str, term_id: str
) -> MedicalTerm | None:
    cursor = await db.execute(
        "SELECT * FROM terms WHERE id = ? AND created_by = ?", (term_id, user_id)
    )
    row = await cursor.fetchone()
    if row is None:
        return None
    return (await _terms_from_rows(db, [row]))[0]


async def list_terms(db: aiosqlite.Connection, user_id: str) -> list[MedicalTerm]:
    cursor = await db.execute(
        "SELECT * FROM terms WHERE created_by = ? ORDER BY created_at DESC, rowid DESC",
        (user_id,),
    )
    return await _terms_from_rows(db, list(await cursor.fetchall()))


async def term_text_exists(
    db: aiosqlite.Connection, user_id: str, text: str, exclude_id: str | None = None
) -> bool:
    cursor = await db.execute(
        "SELECT 1 FROM terms WHERE term = ? AND created_by = ? AND id != ? LIMIT 1",
        (text, user_id, exclude_id or ""),
    )
    return await cursor.fetchone() is not None


async def update_term(
    db: aiosqlite.Connection, user_id: str, term_id: str, body: TermUpdate
) -> MedicalTerm | None:
    cursor = await db.execute(
        """UPDATE terms SET term = ?, meaning = ?, pronunciation = ?, updated_at = ?
           WHERE id = ? AND created_by = ?""",
        (body.term, body.meaning, body.pronunciation, _now(), term_id, user_id),
    )
    if cursor.rowcount == 0:
        await db.rollback()
        return None
    if body.category_ids is not None:
        await _set_links(db, "term_categories", "term_id", term_id, body.category_ids)
    await db.commit()
    return await get_term(db, user_id, term_id)


async def delete_term(db: aiosqlite.Connection, user_id: str, term_id: str) -> bool:
    cursor = await db.execute(
        "DELETE FROM terms WHERE id = ? AND created_by = ?", (term_id, user_id)
    )
    await db.commit()
    return cursor.rowcount > 0


# --- Medical phrases ---


async def _phrases_from_rows(
    db: aiosqlite.Connection, rows: list[aiosqlite.Row]
) -> list[MedicalPhrase]:
    ids = [row["id"] for row in rows]
    links = await _load_links(db, "phrase_categories", "phrase_id", ids)
    return [MedicalPhrase(**dict(r), categories=links[r["id"]]) for r in rows]


async def create_phrase(
    db: aiosqlite.Connection, user_id: str, body: PhraseCreate
) -> MedicalPhrase:
    phrase_id = str(uuid.uuid4())
    now = _now()
    await db.execute(
        """INSERT INTO phrases
           (id, phrase, explanation, created_by, created_at, updated_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (phrase_id, body.phrase, body.explanation, user_id, now, now),
    )
    await _set_links(db, "phrase_categories", "phrase_id", phrase_id, body.category_ids)
    await db.commit()
    return await get_phrase(db, user_id, phrase_id)  # type: ignore[return-value]


async def get_phrase(
    db: aiosqlite.Connection, user_id: str, phrase_id: str
) -> MedicalPhrase | None:
    cursor = await db.execute(
        "SELECT * FROM phrases WHERE id = ? AND created_by = ?", (phrase_id, user_id)
    )
    row = await cursor.fetchone()
    if row is None:
        return None
    return (await _phrases_from_rows(db, [row]))[0]


async def list_phrases(db: aiosqlite.Connection, user_id: str) -> list[MedicalPhrase]:
    cursor = await db.execute(
        "SELECT * FROM phrases WHERE created_by = ? ORDER BY created_at DESC, rowid DESC",
        (user_id,),
    )
    return await _phrases_from_rows(db, list(await cursor.fetchall()))


async def phrase_text_exists(
    db: aiosqlite.Connection, user_id: str, text: str, exclude_id: str | None = None
) -> bool:
    cursor = await db.execute(
        "SELECT 1 FROM phrases WHERE phrase = ? AND created_by = ? AND id != ? LIMIT 1",
        (text, user_id, exclude_id or ""),
    )
    return await cursor.fetchone() is not None


async def update_phrase(
    db: aiosqlite.Connection, user_id: str, phrase_id: str, body: PhraseUpdate
) -> MedicalPhrase | None:
    cursor = await db.execute(
        """UPDATE phrases SET phrase = ?, explanation = ?, updated_at = ?
           WHERE id = ? AND created_by = ?""",
        (body.phrase, body.explanation, _now(), phrase_id, user_id),
    )
    if cursor.rowcount == 0:
        await db.rollback()
        return None
    if body.category_ids is not None:
        await _set_links(
            db, "phrase_categories", "phrase_id", phrase_id, body.category_ids
        )
    await db.commit()
    return await get_phrase(db, user_id, phrase_id)


async def delete_phrase(db: aiosqlite.Connection, user_id: str, phrase_id: str) -> bool:
    cursor = await db.execute(
        "DELETE FROM phrases WHERE id = ? AND created_by = ?", (phrase_id, user_id)
    )
    await db.commit()
    return cursor.rowcount > 0
