"""SQLite database management."""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import aiosqlite

from ..errors import PersistenceError

logger = logging.getLogger(__name__)


class Database:
    """SQLite storage for learner progress."""

    def __init__(self, db_path: Optional[Union[Path, str]] = None):
        """Initialize the database.

        Args:
            db_path: Path to SQLite database file, or ``":memory:"``.
                    Defaults to ~/.local/share/packetjourney/progress.db
        """
        if db_path is None:
            data_dir = Path.home() / ".local" / "share" / "packetjourney"
            db_path = data_dir / "progress.db"

        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Connect to the database.

        Raises:
            PersistenceError: If the database cannot be opened
        """
        try:
            self._connection = await aiosqlite.connect(self.db_path)
            await self._create_tables()
        except aiosqlite.Error as exc:
            raise PersistenceError(f"Could not open {self.db_path}: {exc}") from exc
        logger.debug("Connected to progress database %s", self.db_path)

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def __aenter__(self) -> "Database":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _create_tables(self) -> None:
        """Create database tables if they don't exist."""
        assert self._connection is not None

        await self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS layer_progress (
                identity_id TEXT NOT NULL,
                quest_id TEXT NOT NULL,
                layer_index INTEGER NOT NULL,
                completed BOOLEAN NOT NULL DEFAULT FALSE,
                latest_correct BOOLEAN,
                latest_answer TEXT,
                attempts INTEGER NOT NULL DEFAULT 0,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (identity_id, quest_id, layer_index)
            );

            CREATE TABLE IF NOT EXISTS attempt_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                identity_id TEXT NOT NULL,
                quest_id TEXT NOT NULL,
                layer_index INTEGER NOT NULL,
                answer TEXT,
                correct BOOLEAN NOT NULL,
                attempted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_progress_identity ON layer_progress(identity_id);
            CREATE INDEX IF NOT EXISTS idx_attempt_identity_quest ON attempt_history(identity_id, quest_id);
        """)
        await self._connection.commit()

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if self._connection is None:
            raise PersistenceError("Database not connected. Call connect() first.")
        return self._connection

    # Layer progress
    async def save_layer_record(
        self,
        identity_id: str,
        quest_id: str,
        layer_index: int,
        completed: bool,
        latest_correct: Optional[bool],
        latest_answer: Any,
        attempts: int,
    ) -> None:
        """Upsert the stored record for one layer.

        A stored ``completed`` flag is never cleared.
        """
        answer_json = json.dumps(latest_answer)
        await self.connection.execute(
            """
            INSERT INTO layer_progress (
                identity_id, quest_id, layer_index,
                completed, latest_correct, latest_answer, attempts, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
            ON CONFLICT(identity_id, quest_id, layer_index) DO UPDATE SET
                completed = MAX(completed, excluded.completed),
                latest_correct = excluded.latest_correct,
                latest_answer = excluded.latest_answer,
                attempts = MAX(attempts, excluded.attempts),
                updated_at = CURRENT_TIMESTAMP
            """,
            (identity_id, quest_id, layer_index, completed, latest_correct, answer_json, attempts),
        )
        await self.connection.commit()

    async def load_layer_records(self, identity_id: str, quest_id: str) -> list[dict]:
        """Get stored layer records for one quest, ordered by layer."""
        async with self.connection.execute(
            """
            SELECT layer_index, completed, latest_correct, latest_answer, attempts, updated_at
            FROM layer_progress
            WHERE identity_id = ? AND quest_id = ?
            ORDER BY layer_index
            """,
            (identity_id, quest_id),
        ) as cursor:
            rows = await cursor.fetchall()
            return [
                {
                    "layer_index": row[0],
                    "completed": bool(row[1]),
                    "latest_correct": None if row[2] is None else bool(row[2]),
                    "latest_answer": json.loads(row[3]) if row[3] is not None else None,
                    "attempts": row[4],
                    "updated_at": row[5],
                }
                for row in rows
            ]

    async def get_started_quests(self, identity_id: str) -> list[str]:
        """Get ids of quests with any stored progress."""
        async with self.connection.execute(
            """
            SELECT quest_id, MAX(updated_at) AS last_played
            FROM layer_progress
            WHERE identity_id = ?
            GROUP BY quest_id
            ORDER BY last_played DESC
            """,
            (identity_id,),
        ) as cursor:
            rows = await cursor.fetchall()
            return [row[0] for row in rows]

    async def delete_progress(self, identity_id: str, quest_id: Optional[str] = None) -> int:
        """Delete stored progress for an identity, optionally for one quest."""
        if quest_id is None:
            cursor = await self.connection.execute(
                "DELETE FROM layer_progress WHERE identity_id = ?", (identity_id,)
            )
            await self.connection.execute(
                "DELETE FROM attempt_history WHERE identity_id = ?", (identity_id,)
            )
        else:
            cursor = await self.connection.execute(
                "DELETE FROM layer_progress WHERE identity_id = ? AND quest_id = ?",
                (identity_id, quest_id),
            )
            await self.connection.execute(
                "DELETE FROM attempt_history WHERE identity_id = ? AND quest_id = ?",
                (identity_id, quest_id),
            )
        await self.connection.commit()
        return cursor.rowcount

    # Attempt history
    async def log_attempt(
        self,
        identity_id: str,
        quest_id: str,
        layer_index: int,
        answer: Any,
        correct: bool,
    ) -> None:
        """Log one graded submission."""
        await self.connection.execute(
            """
            INSERT INTO attempt_history (identity_id, quest_id, layer_index, answer, correct)
            VALUES (?, ?, ?, ?, ?)
            """,
            (identity_id, quest_id, layer_index, json.dumps(answer), correct),
        )
        await self.connection.commit()

    async def get_attempt_stats(self, identity_id: str, quest_id: Optional[str] = None) -> dict:
        """Get attempt statistics for an identity."""
        query = """
            SELECT COUNT(*), SUM(CASE WHEN correct THEN 1 ELSE 0 END)
            FROM attempt_history WHERE identity_id = ?
        """
        params: tuple = (identity_id,)
        if quest_id is not None:
            query += " AND quest_id = ?"
            params = (identity_id, quest_id)

        async with self.connection.execute(query, params) as cursor:
            row = await cursor.fetchone()
            total = row[0] or 0
            successes = row[1] or 0
            return {
                "total_attempts": total,
                "successful": successes,
                "success_rate": successes / total if total > 0 else 0,
            }
