"""
Persistence Adapter for the Storybook Wizard.

SQLite storage (WAL mode) for the two entities the wizard keeps outside a
session:
- characters: the user's character directory
- drafts: resumable wizard snapshots

List-like and nested fields are stored as JSON text columns.
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from src.wizard.entities import Character, CharacterStoryDetail, Draft, generate_uuid, now_iso
from src.wizard.errors import CharacterNotFoundError, DraftNotFoundError


# Character fields that may be changed after creation
CHARACTER_UPDATABLE_FIELDS = (
    "name",
    "category",
    "age",
    "avatar_url",
    "gender",
    "physical_description",
    "personality",
    "likes",
    "dislikes",
    "interests",
)


class PersistenceAdapter:
    """
    SQLite-based persistence for characters and drafts.

    Plain CRUD; no wizard rules live here.
    """

    def __init__(self, db_path: str | Path):
        """
        Initialize persistence adapter.

        Args:
            db_path: Path to SQLite database file. Parent directories are created.
        """
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with WAL mode enabled."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = self._get_connection()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database transactions."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._transaction() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    character_id TEXT PRIMARY KEY,
                    owner_id TEXT,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    age INTEGER,
                    avatar_url TEXT,
                    gender TEXT,
                    physical_description TEXT,
                    personality TEXT,
                    likes TEXT,
                    dislikes TEXT,
                    interests TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_characters_owner
                ON characters (owner_id, created_at)
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS drafts (
                    draft_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    current_step INTEGER NOT NULL DEFAULT 1,
                    progress INTEGER NOT NULL DEFAULT 0,
                    step1_completed INTEGER NOT NULL DEFAULT 0,
                    step2_completed INTEGER NOT NULL DEFAULT 0,
                    step3_completed INTEGER NOT NULL DEFAULT 0,
                    status TEXT NOT NULL DEFAULT 'draft',
                    character_ids TEXT NOT NULL DEFAULT '[]',
                    character_details TEXT NOT NULL DEFAULT '{}',
                    form_state TEXT NOT NULL DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_drafts_user
                ON drafts (user_id, updated_at DESC)
            """)

    # =========================================================================
    # Character Operations
    # =========================================================================

    def create_character(self, character: Character) -> Character:
        """Insert a new character."""
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO characters
                (character_id, owner_id, name, category, age, avatar_url, gender,
                 physical_description, personality, likes, dislikes, interests,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    character.character_id,
                    character.owner_id,
                    character.name,
                    character.category.value,
                    character.age,
                    character.avatar_url,
                    character.gender,
                    character.physical_description,
                    character.personality,
                    character.likes,
                    character.dislikes,
                    character.interests,
                    character.created_at,
                    character.updated_at,
                ),
            )
        return character

    def get_character(self, character_id: str) -> Optional[Character]:
        """Get a character by ID."""
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM characters WHERE character_id = ?",
                (character_id,),
            ).fetchone()

        if row is None:
            return None
        return Character.from_dict(dict(row))

    def list_characters(self, owner_id: str) -> list[Character]:
        """List a user's characters, oldest first."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM characters WHERE owner_id = ? ORDER BY created_at ASC",
                (owner_id,),
            ).fetchall()

        return [Character.from_dict(dict(row)) for row in rows]

    def update_character(self, character_id: str, fields: dict) -> Character:
        """
        Update a character's mutable fields.

        Unknown keys are ignored.
        """
        if self.get_character(character_id) is None:
            raise CharacterNotFoundError(character_id)

        updates = []
        values = []
        for name in CHARACTER_UPDATABLE_FIELDS:
            if name not in fields:
                continue
            value = fields[name]
            if name == "category" and value is not None:
                value = getattr(value, "value", value)
            updates.append(f"{name} = ?")
            values.append(value)

        if updates:
            updates.append("updated_at = ?")
            values.append(now_iso())
            values.append(character_id)

            with self._transaction() as conn:
                conn.execute(
                    f"UPDATE characters SET {', '.join(updates)} WHERE character_id = ?",
                    values,
                )

        return self.get_character(character_id)

    # =========================================================================
    # Draft Operations
    # =========================================================================

    def create_draft(self, draft: Draft) -> Draft:
        """Insert a new draft, assigning an ID when it has none."""
        if draft.draft_id is None:
            draft.draft_id = generate_uuid()

        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO drafts
                (draft_id, user_id, title, current_step, progress,
                 step1_completed, step2_completed, step3_completed, status,
                 character_ids, character_details, form_state, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    draft.draft_id,
                    draft.user_id,
                    draft.title,
                    draft.current_step,
                    draft.progress,
                    1 if draft.step1_completed else 0,
                    1 if draft.step2_completed else 0,
                    1 if draft.step3_completed else 0,
                    draft.status,
                    json.dumps(draft.character_ids),
                    json.dumps(_details_to_json(draft.character_details)),
                    json.dumps(draft.form_state),
                    draft.created_at,
                    draft.updated_at,
                ),
            )
        return draft

    def get_draft(self, draft_id: str) -> Optional[Draft]:
        """Get a draft by ID."""
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM drafts WHERE draft_id = ?",
                (draft_id,),
            ).fetchone()

        if row is None:
            return None
        return self._row_to_draft(row)

    def _row_to_draft(self, row: sqlite3.Row) -> Draft:
        return Draft(
            draft_id=row["draft_id"],
            user_id=row["user_id"],
            title=row["title"],
            current_step=row["current_step"],
            progress=row["progress"],
            step1_completed=bool(row["step1_completed"]),
            step2_completed=bool(row["step2_completed"]),
            step3_completed=bool(row["step3_completed"]),
            status=row["status"],
            character_ids=json.loads(row["character_ids"]),
            character_details={
                cid: CharacterStoryDetail.from_dict(detail)
                for cid, detail in json.loads(row["character_details"]).items()
            },
            form_state=json.loads(row["form_state"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def update_draft(self, draft_id: str, draft: Draft) -> Draft:
        """
        Replace the stored content of an existing draft.

        The identity, owner and creation time are kept.
        """
        existing = self.get_draft(draft_id)
        if existing is None:
            raise DraftNotFoundError(draft_id)

        updated_at = draft.updated_at or now_iso()
        with self._transaction() as conn:
            conn.execute(
                """
                UPDATE drafts SET
                    title = ?, current_step = ?, progress = ?,
                    step1_completed = ?, step2_completed = ?, step3_completed = ?,
                    status = ?, character_ids = ?, character_details = ?,
                    form_state = ?, updated_at = ?
                WHERE draft_id = ?
                """,
                (
                    draft.title,
                    draft.current_step,
                    draft.progress,
                    1 if draft.step1_completed else 0,
                    1 if draft.step2_completed else 0,
                    1 if draft.step3_completed else 0,
                    draft.status,
                    json.dumps(draft.character_ids),
                    json.dumps(_details_to_json(draft.character_details)),
                    json.dumps(draft.form_state),
                    updated_at,
                    draft_id,
                ),
            )

        return self.get_draft(draft_id)

    def list_drafts(self, user_id: str, limit: int = 100) -> list[Draft]:
        """List a user's drafts, most recently updated first."""
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM drafts WHERE user_id = ? ORDER BY updated_at DESC LIMIT ?",
                (user_id, limit),
            ).fetchall()

        return [self._row_to_draft(row) for row in rows]

    def delete_draft(self, draft_id: str) -> None:
        with self._transaction() as conn:
            cursor = conn.execute("DELETE FROM drafts WHERE draft_id = ?", (draft_id,))
            if cursor.rowcount == 0:
                raise DraftNotFoundError(draft_id)


def _details_to_json(details: dict) -> dict:
    return {
        str(cid): detail.to_dict() if isinstance(detail, CharacterStoryDetail) else dict(detail)
        for cid, detail in details.items()
    }
