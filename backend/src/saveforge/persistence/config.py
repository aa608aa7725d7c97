"""Database configuration and adapter factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from saveforge.persistence.adapter import PersistenceAdapter


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    Supports sqlite:/// URLs.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Create config from environment variables.

        Resolution order:
        1. DATABASE_URL env var (standard)
        2. SAVEFORGE_DB_PATH env var (converted to sqlite:/// URL)
        3. Default: sqlite:///{base_path}/data/saveforge.db
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("SAVEFORGE_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")

        if base_path:
            return cls(url=f"sqlite:///{base_path / 'data' / 'saveforge.db'}")

        return cls(url="sqlite:///saveforge.db")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


def create_adapter(config: DatabaseConfig) -> PersistenceAdapter:
    """Create a persistence adapter based on the database URL scheme.

    Returns:
        A PersistenceAdapter instance (not yet connected).

    Raises:
        ValueError: For unsupported URL schemes.
    """
    if config.is_sqlite:
        from saveforge.persistence.sqlite import SQLiteAdapter

        db_path = config.url.replace("sqlite:///", "")
        if not db_path:
            db_path = ":memory:"
        return SQLiteAdapter(db_path)

    raise ValueError(f"Unsupported database URL scheme: {config.url}")
