"""
Board storage backend (SQLite) for the persistence service.

Stores the two collections the board client talks to:
    columns(id, title)
    cards(id, title, description, column_id)

Rows are exchanged as wire dicts ({id, title, description, columnId} for
cards, {id, title} for columns). There is no foreign key from cards to
columns: the client deletes a column and its cards with independent calls,
in any order.
"""
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .ids import make_entity_id
from .schema import EntityKind

logger = logging.getLogger(__name__)

# wire field -> column name, per collection
_FIELDS = {
    EntityKind.CARD: {"title": "title", "description": "description", "columnId": "column_id"},
    EntityKind.CONTAINER: {"title": "title"},
}


class DuplicateIdError(Exception):
    """Raised when creating an entity whose id already exists."""
    pass


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection with WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BoardStore:
    """SQLite-backed store for cards and columns."""

    def __init__(self, db_path: str = None):
        """Initialize store and create tables if needed."""
        if db_path is None:
            db_path = str(Path.home() / ".local" / "share" / "boardsync" / "board.db")
        self.db_path = db_path
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self):
        with _connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS columns (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS cards (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT DEFAULT '',
                    column_id TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_cards_column ON cards(column_id)")
            conn.commit()

    def create(self, kind: EntityKind, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert an entity. A missing id is generated. Raises DuplicateIdError."""
        entity_id = str(data.get("id") or make_entity_id())
        fields = _FIELDS[kind]
        columns = ["id"] + list(fields.values()) + ["created_at", "updated_at"]
        now = _now()
        values = [entity_id] + [self._value(data.get(wire)) for wire in fields] + [now, now]
        if kind is EntityKind.CARD and values[2] is None:
            values[2] = ""  # description

        placeholders = ", ".join("?" for _ in columns)
        try:
            with _connect(self.db_path) as conn:
                conn.execute(
                    f"INSERT INTO {kind.collection} ({', '.join(columns)}) VALUES ({placeholders})",
                    values,
                )
                conn.commit()
        except sqlite3.IntegrityError:
            if self.get(kind, entity_id) is not None:
                raise DuplicateIdError(f"{kind.label} {entity_id} already exists")
            raise
        return self.get(kind, entity_id)

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Dict[str, Any]]:
        with _connect(self.db_path) as conn:
            row = conn.execute(
                f"SELECT * FROM {kind.collection} WHERE id = ?",
                (entity_id,),
            ).fetchone()
        return self._row_to_wire(kind, row) if row else None

    def update(self, kind: EntityKind, entity_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply a partial update. Unknown fields are ignored. Missing entity -> None."""
        fields = _FIELDS[kind]
        changes = {fields[wire]: self._value(value) for wire, value in data.items() if wire in fields}

        with _connect(self.db_path) as conn:
            exists = conn.execute(
                f"SELECT 1 FROM {kind.collection} WHERE id = ?", (entity_id,)
            ).fetchone()
            if not exists:
                return None
            if changes:
                assignments = ", ".join(f"{col} = ?" for col in changes)
                conn.execute(
                    f"UPDATE {kind.collection} SET {assignments}, updated_at = ? WHERE id = ?",
                    list(changes.values()) + [_now(), entity_id],
                )
                conn.commit()
        return self.get(kind, entity_id)

    def delete(self, kind: EntityKind, entity_id: str) -> bool:
        """Delete one entity. Returns False if it did not exist."""
        with _connect(self.db_path) as conn:
            cursor = conn.execute(f"DELETE FROM {kind.collection} WHERE id = ?", (entity_id,))
            conn.commit()
            return cursor.rowcount > 0

    def list_all(self, kind: EntityKind) -> List[Dict[str, Any]]:
        """Every entity of a kind, in creation order."""
        with _connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT * FROM {kind.collection} ORDER BY created_at ASC, rowid ASC"
            ).fetchall()
        return [self._row_to_wire(kind, row) for row in rows]

    @staticmethod
    def _value(value: Any) -> Any:
        return None if value is None else str(value)

    @staticmethod
    def _row_to_wire(kind: EntityKind, row: sqlite3.Row) -> Dict[str, Any]:
        data = dict(row)
        wire = {"id": data["id"]}
        for wire_name, column in _FIELDS[kind].items():
            wire[wire_name] = data.get(column)
        if kind is EntityKind.CARD and wire["description"] is None:
            wire["description"] = ""
        return wire
