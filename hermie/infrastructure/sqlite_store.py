"""SQLite-based store for subjects and captures.

Implements the CardRepository and SubjectRepository ports.
Uses async-safe operations: an asyncio.Lock serializes writers and the
blocking sqlite3 calls run in a worker thread.
"""

import asyncio
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from hermie.domain.constants import DEFAULT_SUBJECT_ID, DEFAULT_SUBJECT_NAME, INITIAL_EASE
from hermie.domain.entities.card import Card
from hermie.domain.entities.subject import Subject
from hermie.domain.value_objects.capture_filter import CaptureFilter
from hermie.domain.value_objects.card_state import CardState
from hermie.infrastructure.retry import classify_sqlite_error, with_retry

T = TypeVar("T")

_CARD_COLUMNS = """
    id, subject_id, image_path, created_at,
    state, due_at, interval_days, ease, reps, lapses, last_reviewed_at
"""


class SqliteStore:
    """SQLite store for subjects and captures.

    Connections are short-lived per operation. Lock contention from another
    process ("database is locked") is retried with backoff.
    """

    def __init__(self, db_path: str | Path = "hermie.db"):
        """Initialize store.

        Args:
            db_path: Path to SQLite database file

        Database tables are created synchronously on construction.
        """
        self._db_path = Path(db_path)
        self._lock = asyncio.Lock()
        self._initialized = False
        # Initialize tables synchronously (safe during startup)
        self._init_db()
        self._initialized = True

    async def initialize(self) -> None:
        """Initialize database schema (async-safe)."""
        if not self._initialized:
            await asyncio.to_thread(self._init_db)
            self._initialized = True

    def _connect(self) -> sqlite3.Connection:
        """Create SQLite connection.

        Note: journal_mode=WAL persists to database file.
        """
        conn = sqlite3.connect(self._db_path, timeout=1.0)
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        """Initialize database schema and the inbox subject."""
        conn = self._connect()
        try:
            with conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS subjects (
                        id TEXT PRIMARY KEY,
                        name TEXT NOT NULL,
                        created_at INTEGER NOT NULL
                    )
                """
                )
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS captures (
                        id TEXT PRIMARY KEY,
                        subject_id TEXT NOT NULL,
                        image_path TEXT NOT NULL,
                        created_at INTEGER NOT NULL,
                        state TEXT NOT NULL DEFAULT 'new',
                        due_at INTEGER NOT NULL DEFAULT 0,
                        interval_days REAL NOT NULL DEFAULT 0,
                        ease REAL NOT NULL DEFAULT {INITIAL_EASE},
                        reps INTEGER NOT NULL DEFAULT 0,
                        lapses INTEGER NOT NULL DEFAULT 0,
                        last_reviewed_at INTEGER,
                        FOREIGN KEY(subject_id) REFERENCES subjects(id)
                    )
                """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_captures_subject_id ON captures(subject_id)"
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_captures_created_at ON captures(created_at)"
                )
                # Due-queue lookups: WHERE subject_id = ? AND due_at <= ?
                conn.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_captures_subject_due
                    ON captures(subject_id, due_at)
                """
                )
                conn.execute(
                    "INSERT OR IGNORE INTO subjects (id, name, created_at) VALUES (?, ?, 0)",
                    (DEFAULT_SUBJECT_ID, DEFAULT_SUBJECT_NAME),
                )
        finally:
            conn.close()

    @with_retry()
    async def _run(self, operation: Callable[..., T], *args) -> T:
        """Run a synchronous operation in a worker thread under the lock."""
        async with self._lock:
            return await asyncio.to_thread(self._guarded, operation, *args)

    def _guarded(self, operation: Callable[..., T], *args) -> T:
        conn = self._connect()
        try:
            with conn:
                return operation(conn, *args)
        except sqlite3.Error as e:
            raise classify_sqlite_error(e) from e
        finally:
            conn.close()

    # --- Subject methods ---

    async def list_subjects(self) -> list[Subject]:
        """List subjects ordered by creation time."""
        return await self._run(self._list_subjects_sync)

    def _list_subjects_sync(self, conn: sqlite3.Connection) -> list[Subject]:
        rows = conn.execute(
            "SELECT id, name, created_at FROM subjects ORDER BY created_at ASC, id ASC"
        ).fetchall()
        return [self._row_to_subject(row) for row in rows]

    async def get_subject(self, subject_id: str) -> Subject | None:
        """Read a subject by ID."""
        return await self._run(self._get_subject_sync, subject_id)

    def _get_subject_sync(self, conn: sqlite3.Connection, subject_id: str) -> Subject | None:
        row = conn.execute(
            "SELECT id, name, created_at FROM subjects WHERE id = ?", (subject_id,)
        ).fetchone()
        return self._row_to_subject(row) if row else None

    async def subject_exists(self, subject_id: str) -> bool:
        """Check whether a subject ID exists."""
        return await self.get_subject(subject_id) is not None

    async def subject_name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        """Check case-insensitively whether a name is taken."""
        return await self._run(self._subject_name_exists_sync, name, exclude_id)

    def _subject_name_exists_sync(
        self, conn: sqlite3.Connection, name: str, exclude_id: str | None
    ) -> bool:
        row = conn.execute(
            "SELECT id FROM subjects WHERE LOWER(name) = LOWER(?) AND id IS NOT ?",
            (name, exclude_id),
        ).fetchone()
        return row is not None

    async def create_subject(self, subject: Subject) -> None:
        """Persist a new subject."""
        await self._run(self._create_subject_sync, subject)

    def _create_subject_sync(self, conn: sqlite3.Connection, subject: Subject) -> None:
        conn.execute(
            "INSERT INTO subjects (id, name, created_at) VALUES (?, ?, ?)",
            (subject.id, subject.name, subject.created_at),
        )

    async def rename_subject(self, subject_id: str, name: str) -> Subject | None:
        """Rename a subject, returning the updated row."""
        return await self._run(self._rename_subject_sync, subject_id, name)

    def _rename_subject_sync(
        self, conn: sqlite3.Connection, subject_id: str, name: str
    ) -> Subject | None:
        conn.execute("UPDATE subjects SET name = ? WHERE id = ?", (name, subject_id))
        return self._get_subject_sync(conn, subject_id)

    async def delete_subject(self, subject_id: str) -> bool:
        """Delete a subject row."""
        return await self._run(self._delete_subject_sync, subject_id)

    def _delete_subject_sync(self, conn: sqlite3.Connection, subject_id: str) -> bool:
        cursor = conn.execute("DELETE FROM subjects WHERE id = ?", (subject_id,))
        return cursor.rowcount > 0

    # --- Card methods ---

    async def insert_card(self, card: Card) -> None:
        """Persist a newly captured card."""
        await self._run(self._insert_card_sync, card)

    def _insert_card_sync(self, conn: sqlite3.Connection, card: Card) -> None:
        conn.execute(
            f"""
            INSERT INTO captures ({_CARD_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                card.id,
                card.subject_id,
                card.image_path,
                card.created_at,
                card.state.value,
                card.due_at,
                card.interval_days,
                card.ease,
                card.reps,
                card.lapses,
                card.last_reviewed_at,
            ),
        )

    async def get_card(self, card_id: str) -> Card | None:
        """Read a card by ID."""
        return await self._run(self._get_card_sync, card_id)

    def _get_card_sync(self, conn: sqlite3.Connection, card_id: str) -> Card | None:
        row = conn.execute(
            f"SELECT {_CARD_COLUMNS} FROM captures WHERE id = ?", (card_id,)
        ).fetchone()
        return self._row_to_card(row) if row else None

    async def update_card(self, card: Card) -> bool:
        """Write back a card's scheduling fields."""
        return await self._run(self._update_card_sync, card)

    def _update_card_sync(self, conn: sqlite3.Connection, card: Card) -> bool:
        cursor = conn.execute(
            """
            UPDATE captures
            SET state = ?,
                due_at = ?,
                interval_days = ?,
                ease = ?,
                reps = ?,
                lapses = ?,
                last_reviewed_at = ?
            WHERE id = ?
            """,
            (
                card.state.value,
                card.due_at,
                card.interval_days,
                card.ease,
                card.reps,
                card.lapses,
                card.last_reviewed_at,
                card.id,
            ),
        )
        return cursor.rowcount > 0

    async def delete_card(self, card_id: str) -> bool:
        """Delete a card."""
        return await self._run(self._delete_card_sync, card_id)

    def _delete_card_sync(self, conn: sqlite3.Connection, card_id: str) -> bool:
        cursor = conn.execute("DELETE FROM captures WHERE id = ?", (card_id,))
        return cursor.rowcount > 0

    async def delete_cards_for_subject(self, subject_id: str) -> int:
        """Delete all cards in a subject."""
        return await self._run(self._delete_cards_for_subject_sync, subject_id)

    def _delete_cards_for_subject_sync(self, conn: sqlite3.Connection, subject_id: str) -> int:
        cursor = conn.execute("DELETE FROM captures WHERE subject_id = ?", (subject_id,))
        return cursor.rowcount

    async def count_due(self, subject_id: str, now: int) -> int:
        """Count cards in subject with due_at <= now."""
        return await self._run(self._count_due_sync, subject_id, now)

    def _count_due_sync(self, conn: sqlite3.Connection, subject_id: str, now: int) -> int:
        result = conn.execute(
            "SELECT COUNT(*) FROM captures WHERE subject_id = ? AND due_at <= ?",
            (subject_id, now),
        ).fetchone()
        return result[0] if result else 0

    async def next_due(self, subject_id: str, now: int) -> Card | None:
        """Get the due card with the smallest (due_at, created_at)."""
        return await self._run(self._next_due_sync, subject_id, now)

    def _next_due_sync(self, conn: sqlite3.Connection, subject_id: str, now: int) -> Card | None:
        row = conn.execute(
            f"""
            SELECT {_CARD_COLUMNS}
            FROM captures
            WHERE subject_id = ? AND due_at <= ?
            ORDER BY due_at ASC, created_at ASC
            LIMIT 1
            """,
            (subject_id, now),
        ).fetchone()
        return self._row_to_card(row) if row else None

    async def list_cards(
        self,
        subject_id: str,
        capture_filter: CaptureFilter,
        limit: int,
        offset: int,
        now: int,
    ) -> list[Card]:
        """List cards of a subject, newest first."""
        return await self._run(
            self._list_cards_sync, subject_id, capture_filter, limit, offset, now
        )

    def _list_cards_sync(
        self,
        conn: sqlite3.Connection,
        subject_id: str,
        capture_filter: CaptureFilter,
        limit: int,
        offset: int,
        now: int,
    ) -> list[Card]:
        where = "subject_id = ?"
        params: list[str | int] = [subject_id]
        if capture_filter is CaptureFilter.DUE:
            where += " AND due_at <= ?"
            params.append(now)
        elif capture_filter is not CaptureFilter.ALL:
            where += " AND state = ?"
            params.append(capture_filter.value)

        rows = conn.execute(
            f"""
            SELECT {_CARD_COLUMNS}
            FROM captures
            WHERE {where}
            ORDER BY created_at DESC
            LIMIT ? OFFSET ?
            """,
            (*params, limit, offset),
        ).fetchall()
        return [self._row_to_card(row) for row in rows]

    async def latest_cards(self, subject_id: str, limit: int) -> list[Card]:
        """Get the most recent captures of a subject."""
        return await self.list_cards(subject_id, CaptureFilter.ALL, limit, 0, 0)

    async def count_cards(self, subject_id: str) -> int:
        """Count all cards in a subject."""
        return await self._run(self._count_cards_sync, subject_id)

    def _count_cards_sync(self, conn: sqlite3.Connection, subject_id: str) -> int:
        result = conn.execute(
            "SELECT COUNT(*) FROM captures WHERE subject_id = ?", (subject_id,)
        ).fetchone()
        return result[0] if result else 0

    def _row_to_card(self, row: sqlite3.Row) -> Card:
        """Convert database row to Card."""
        return Card(
            id=row["id"],
            subject_id=row["subject_id"],
            image_path=row["image_path"],
            created_at=row["created_at"],
            state=CardState(row["state"]),
            due_at=row["due_at"],
            interval_days=float(row["interval_days"]),
            ease=float(row["ease"]),
            reps=row["reps"],
            lapses=row["lapses"],
            last_reviewed_at=row["last_reviewed_at"],
        )

    def _row_to_subject(self, row: sqlite3.Row) -> Subject:
        """Convert database row to Subject."""
        return Subject(id=row["id"], name=row["name"], created_at=row["created_at"])

    def close(self) -> None:
        """Close the store.

        No-op since connections are short-lived per operation.
        Provided for API consistency with cleanup code.
        """
        pass
