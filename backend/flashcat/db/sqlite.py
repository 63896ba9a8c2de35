import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from flashcat.config import settings
from flashcat.models.flashcard import (
    CardProgress,
    Flashcard,
    FlashcardUpdate,
    StudyDirection,
)
from flashcat.models.progress import DailyActivity, UnlockedAchievement, UserProgress

_db_path: Path | None = None

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS flashcards (
    id          TEXT PRIMARY KEY,
    front       TEXT NOT NULL,
    back        TEXT NOT NULL,
    notes       TEXT NOT NULL DEFAULT '',
    category    TEXT NOT NULL DEFAULT 'Vocabulary',
    subcategory TEXT,
    gender      TEXT,
    icon_key    TEXT NOT NULL DEFAULT '',
    mnemonic    TEXT,
    created_at  TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_flashcards_category ON flashcards(category);

CREATE TABLE IF NOT EXISTS card_progress (
    card_id          TEXT NOT NULL REFERENCES flashcards(id) ON DELETE CASCADE,
    direction        TEXT NOT NULL,
    ease_factor      REAL NOT NULL DEFAULT 2.5,
    interval         INTEGER NOT NULL DEFAULT 0,
    repetitions      INTEGER NOT NULL DEFAULT 0,
    due_date         TEXT NOT NULL,
    last_review_date TEXT,
    last_quality     INTEGER,
    total_reviews    INTEGER NOT NULL DEFAULT 0,
    correct_reviews  INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (card_id, direction)
);
CREATE INDEX IF NOT EXISTS idx_progress_due ON card_progress(due_date);

CREATE TABLE IF NOT EXISTS user_progress (
    id                      INTEGER PRIMARY KEY CHECK (id = 1),
    xp                      INTEGER NOT NULL DEFAULT 0,
    level                   INTEGER NOT NULL DEFAULT 1,
    current_streak          INTEGER NOT NULL DEFAULT 0,
    longest_streak          INTEGER NOT NULL DEFAULT 0,
    last_study_date         TEXT,
    total_cards_reviewed    INTEGER NOT NULL DEFAULT 0,
    total_correct           INTEGER NOT NULL DEFAULT 0,
    total_time_spent_ms     INTEGER NOT NULL DEFAULT 0,
    cards_learned           INTEGER NOT NULL DEFAULT 0,
    streak_freeze_available INTEGER NOT NULL DEFAULT 1,
    last_streak_freeze_used TEXT,
    updated_at              TEXT NOT NULL DEFAULT (datetime('now'))
);
INSERT OR IGNORE INTO user_progress(id) VALUES (1);

CREATE TABLE IF NOT EXISTS daily_activity (
    day   TEXT PRIMARY KEY,
    cards INTEGER NOT NULL DEFAULT 0,
    xp    INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS achievements (
    achievement_id TEXT PRIMARY KEY,
    unlocked_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS local_store (
    name       TEXT PRIMARY KEY,
    payload    TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
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
        cursor = await db.execute("SELECT MAX(version) FROM schema_version")
        current_version = (await cursor.fetchone())[0]
        # Migration v1 → v2: per-card memory aids
        if current_version < 2:
            cursor = await db.execute("PRAGMA table_info(flashcards)")
            columns = {row[1] for row in await cursor.fetchall()}
            if "mnemonic" not in columns:
                await db.execute("ALTER TABLE flashcards ADD COLUMN mnemonic TEXT")
            await db.execute("INSERT OR IGNORE INTO schema_version(version) VALUES (2)")
        await db.commit()


async def get_db() -> AsyncIterator[aiosqlite.Connection]:
    assert _db_path is not None, "SQLite not initialized"
    async with aiosqlite.connect(_db_path) as db:
        db.row_factory = aiosqlite.Row
        await db.execute("PRAGMA foreign_keys=ON")
        yield db


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


# --- Flashcards ---


def _row_to_flashcard(row: aiosqlite.Row) -> Flashcard:
    return Flashcard(**dict(row))


async def insert_flashcards(db: aiosqlite.Connection, cards: list[Flashcard]) -> None:
    await db.executemany(
        """INSERT OR IGNORE INTO flashcards
           (id, front, back, notes, category, subcategory, gender,
            icon_key, mnemonic, created_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        [
            (
                c.id,
                c.front,
                c.back,
                c.notes,
                c.category,
                c.subcategory,
                c.gender.value if c.gender else None,
                c.icon_key,
                c.mnemonic,
                c.created_at,
            )
            for c in cards
        ],
    )
    await db.commit()


async def get_flashcard(db: aiosqlite.Connection, card_id: str) -> Flashcard | None:
    cursor = await db.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,))
    row = await cursor.fetchone()
    return _row_to_flashcard(row) if row else None


async def list_flashcards(
    db: aiosqlite.Connection,
    category: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[Flashcard], int]:
    where = "WHERE category = ?" if category else ""
    params: list[Any] = [category] if category else []

    count_cursor = await db.execute(
        f"SELECT COUNT(*) FROM flashcards {where}", params  # noqa: S608
    )
    total = (await count_cursor.fetchone())[0]

    cursor = await db.execute(
        f"SELECT * FROM flashcards {where} ORDER BY created_at ASC, id ASC "  # noqa: S608
        "LIMIT ? OFFSET ?",
        params + [limit if limit is not None else -1, offset],
    )
    rows = await cursor.fetchall()
    return [_row_to_flashcard(r) for r in rows], total


async def update_flashcard(
    db: aiosqlite.Connection, card_id: str, updates: FlashcardUpdate
) -> Flashcard | None:
    fields = updates.model_dump(exclude_none=True)
    if not fields:
        return await get_flashcard(db, card_id)

    for key, val in fields.items():
        if hasattr(val, "value"):
            fields[key] = val.value

    set_clause = ", ".join(f"{k} = ?" for k in fields)
    values = list(fields.values()) + [card_id]
    await db.execute(
        f"UPDATE flashcards SET {set_clause} WHERE id = ?",  # noqa: S608
        values,
    )
    await db.commit()
    return await get_flashcard(db, card_id)


async def delete_flashcards(db: aiosqlite.Connection, card_ids: list[str]) -> int:
    if not card_ids:
        return 0
    placeholders = ", ".join("?" for _ in card_ids)
    cursor = await db.execute(
        f"DELETE FROM flashcards WHERE id IN ({placeholders})",  # noqa: S608
        card_ids,
    )
    await db.commit()
    return cursor.rowcount or 0


# --- Card progress ---


def _row_to_progress(row: aiosqlite.Row) -> CardProgress:
    return CardProgress(**dict(row))


async def get_all_progress(db: aiosqlite.Connection) -> dict[str, CardProgress]:
    cursor = await db.execute("SELECT * FROM card_progress")
    rows = await cursor.fetchall()
    progress = [_row_to_progress(r) for r in rows]
    return {p.key: p for p in progress}


async def get_card_progress(
    db: aiosqlite.Connection, card_id: str, direction: StudyDirection
) -> CardProgress | None:
    cursor = await db.execute(
        "SELECT * FROM card_progress WHERE card_id = ? AND direction = ?",
        (card_id, direction.value),
    )
    row = await cursor.fetchone()
    return _row_to_progress(row) if row else None


async def upsert_card_progress(db: aiosqlite.Connection, p: CardProgress) -> None:
    await db.execute(
        """INSERT INTO card_progress
           (card_id, direction, ease_factor, interval, repetitions, due_date,
            last_review_date, last_quality, total_reviews, correct_reviews)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
           ON CONFLICT(card_id, direction) DO UPDATE SET
             ease_factor = excluded.ease_factor,
             interval = excluded.interval,
             repetitions = excluded.repetitions,
             due_date = excluded.due_date,
             last_review_date = excluded.last_review_date,
             last_quality = excluded.last_quality,
             total_reviews = excluded.total_reviews,
             correct_reviews = excluded.correct_reviews""",
        (
            p.card_id,
            p.direction.value,
            p.ease_factor,
            p.interval,
            p.repetitions,
            p.due_date.isoformat(),
            p.last_review_date.isoformat() if p.last_review_date else None,
            p.last_quality,
            p.total_reviews,
            p.correct_reviews,
        ),
    )
    await db.commit()


# --- User progress ---

_PROGRESS_COLUMNS = (
    "xp",
    "level",
    "current_streak",
    "longest_streak",
    "last_study_date",
    "total_cards_reviewed",
    "total_correct",
    "total_time_spent_ms",
    "cards_learned",
    "streak_freeze_available",
    "last_streak_freeze_used",
)


async def get_user_progress(db: aiosqlite.Connection) -> UserProgress:
    cursor = await db.execute(
        f"SELECT {', '.join(_PROGRESS_COLUMNS)} FROM user_progress WHERE id = 1"  # noqa: S608
    )
    row = await cursor.fetchone()
    fields = dict(row) if row else {}
    fields["streak_freeze_available"] = bool(fields.get("streak_freeze_available", 1))

    cursor = await db.execute("SELECT day, cards, xp FROM daily_activity")
    activity = {
        r["day"]: DailyActivity(cards=r["cards"], xp=r["xp"]) for r in await cursor.fetchall()
    }
    return UserProgress(**fields, daily_activity=activity)


async def save_user_progress(db: aiosqlite.Connection, progress: UserProgress) -> None:
    """Write the whole progress document. Last write wins."""
    values: list[Any] = []
    for column in _PROGRESS_COLUMNS:
        value = getattr(progress, column)
        if isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, bool):
            value = int(value)
        values.append(value)

    set_clause = ", ".join(f"{c} = ?" for c in _PROGRESS_COLUMNS)
    await db.execute(
        f"UPDATE user_progress SET {set_clause}, updated_at = ? WHERE id = 1",  # noqa: S608
        values + [_now()],
    )
    await db.executemany(
        "INSERT INTO daily_activity(day, cards, xp) VALUES (?, ?, ?) "
        "ON CONFLICT(day) DO UPDATE SET cards = excluded.cards, xp = excluded.xp",
        [(day, a.cards, a.xp) for day, a in progress.daily_activity.items()],
    )
    await db.commit()


# --- Achievements ---


async def list_unlocked_achievements(db: aiosqlite.Connection) -> list[UnlockedAchievement]:
    cursor = await db.execute(
        "SELECT achievement_id, unlocked_at FROM achievements ORDER BY unlocked_at ASC"
    )
    rows = await cursor.fetchall()
    return [UnlockedAchievement(**dict(r)) for r in rows]


async def unlock_achievement(
    db: aiosqlite.Connection, achievement_id: str, unlocked_at: datetime
) -> bool:
    cursor = await db.execute(
        "INSERT OR IGNORE INTO achievements(achievement_id, unlocked_at) VALUES (?, ?)",
        (achievement_id, unlocked_at.isoformat()),
    )
    await db.commit()
    return (cursor.rowcount or 0) > 0


# --- Named local documents ---


async def load_document(db: aiosqlite.Connection, name: str) -> Any | None:
    cursor = await db.execute("SELECT payload FROM local_store WHERE name = ?", (name,))
    row = await cursor.fetchone()
    return json.loads(row[0]) if row else None


async def save_document(db: aiosqlite.Connection, name: str, payload: Any) -> None:
    await db.execute(
        "INSERT INTO local_store(name, payload, updated_at) VALUES (?, ?, ?) "
        "ON CONFLICT(name) DO UPDATE SET payload = excluded.payload, "
        "updated_at = excluded.updated_at",
        (name, json.dumps(payload), _now()),
    )
    await db.commit()
