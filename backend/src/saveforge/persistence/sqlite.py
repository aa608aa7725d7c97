"""SQLite persistence adapter."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from saveforge.core.types import get_storage_type
from saveforge.metadata.loader import EntityModel
from saveforge.persistence.sequences import SequenceService

logger = logging.getLogger(__name__)


class SQLiteAdapter:
    """Simple SQLite persistence adapter."""

    def __init__(self, db_path: Path | str = ":memory:"):
        self.db_path = str(db_path)
        self.conn: sqlite3.Connection | None = None
        self._sequence_service: SequenceService | None = None

    def connect(self) -> None:
        """Establish database connection."""
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._sequence_service = SequenceService(self.conn)

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def initialize_entity(self, entity: EntityModel) -> None:
        """Create table for entity if it doesn't exist."""
        if not self.conn:
            raise RuntimeError("Database not connected")

        columns = []
        for field in entity.fields:
            col_def = f"{field.name} {get_storage_type(field.type)}"
            if field.primary_key:
                col_def += " PRIMARY KEY"
            columns.append(col_def)

        table_name = self._table_name(entity.name)
        self.conn.execute(f"CREATE TABLE IF NOT EXISTS {table_name} ({', '.join(columns)})")
        self.conn.commit()
        logger.debug("Initialized table %s", table_name)

    def insert(self, entity: EntityModel, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a new record, generating a sequence-based ID if none is set."""
        if not self.conn or not self._sequence_service:
            raise RuntimeError("Database not connected")

        data = dict(data)
        pk = entity.primary_key
        if data.get(pk) is None:
            data[pk] = self._sequence_service.next_id(entity.name, entity.abbreviation)

        now = datetime.now(timezone.utc).isoformat()
        field_names = entity.field_names
        if "createdAt" in field_names:
            data.setdefault("createdAt", now)
        if "updatedAt" in field_names:
            data.setdefault("updatedAt", now)

        columns = [f for f in field_names if f in data]
        placeholders = ", ".join("?" for _ in columns)
        table_name = self._table_name(entity.name)
        sql = f"INSERT INTO {table_name} ({', '.join(columns)}) VALUES ({placeholders})"

        self.conn.execute(sql, [data[c] for c in columns])
        self.conn.commit()

        return self.get(entity, data[pk])  # type: ignore[return-value]

    def get(self, entity: EntityModel, id: str) -> dict[str, Any] | None:
        """Fetch a single record by ID."""
        if not self.conn:
            raise RuntimeError("Database not connected")

        table_name = self._table_name(entity.name)
        cursor = self.conn.execute(
            f"SELECT * FROM {table_name} WHERE {entity.primary_key} = ?", [id]
        )
        row = cursor.fetchone()
        return dict(row) if row else None

    def update(
        self, entity: EntityModel, id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Update an existing record. Returns None if it does not exist."""
        if not self.conn:
            raise RuntimeError("Database not connected")

        data = dict(data)
        if "updatedAt" in entity.field_names:
            data["updatedAt"] = datetime.now(timezone.utc).isoformat()

        # Never update the primary key
        updatable = [
            f.name for f in entity.fields
            if f.name in data and not f.primary_key
        ]
        if not updatable:
            return self.get(entity, id)

        set_clause = ", ".join(f"{f} = ?" for f in updatable)
        values = [data[f] for f in updatable]
        values.append(id)

        table_name = self._table_name(entity.name)
        cursor = self.conn.execute(
            f"UPDATE {table_name} SET {set_clause} WHERE {entity.primary_key} = ?", values
        )
        self.conn.commit()

        if cursor.rowcount == 0:
            return None
        return self.get(entity, id)

    def _table_name(self, entity_name: str) -> str:
        """Convert entity name to table name (lowercase, plural)."""
        return entity_name.lower() + "s"
