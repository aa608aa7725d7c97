"""Sequence management for entity ID generation.

Provides sequential ID generation with format: {ABBREV}-{SEQUENCE}
Example: ORG-00001, PTY-00042
"""

import sqlite3


class SequenceService:
    """Manages per-entity sequences for ID generation."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._ensure_table()

    def _ensure_table(self) -> None:
        """Create the sequences table if it doesn't exist."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS _sequences (
                entity TEXT PRIMARY KEY,
                next_value INTEGER NOT NULL DEFAULT 1
            )
        """)
        self.conn.commit()

    def next_id(self, entity_name: str, abbreviation: str) -> str:
        """Generate the next ID for an entity, e.g. "ORG-00001"."""
        sequence_value = self._get_and_increment(entity_name)
        return f"{abbreviation}-{sequence_value:05d}"

    def _get_and_increment(self, entity_name: str) -> int:
        cursor = self.conn.execute(
            "SELECT next_value FROM _sequences WHERE entity = ?",
            [entity_name],
        )
        row = cursor.fetchone()

        if row:
            current_value = row[0]
            self.conn.execute(
                "UPDATE _sequences SET next_value = next_value + 1 WHERE entity = ?",
                [entity_name],
            )
        else:
            current_value = 1
            self.conn.execute(
                "INSERT INTO _sequences (entity, next_value) VALUES (?, 2)",
                [entity_name],
            )

        self.conn.commit()
        return current_value

    def current_value(self, entity_name: str) -> int:
        """Get the current sequence value without incrementing.

        Returns 0 if no sequence exists yet.
        """
        cursor = self.conn.execute(
            "SELECT next_value - 1 FROM _sequences WHERE entity = ?",
            [entity_name],
        )
        row = cursor.fetchone()
        return row[0] if row else 0
