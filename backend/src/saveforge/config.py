"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from saveforge.persistence.config import DatabaseConfig

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class Settings:
    """SaveForge runtime settings.

    Attributes:
        metadata_path: Directory holding entities/*.yaml
        strict_hooks: Raise on unregistered hook/validator names instead of skipping
        log_level: Root log level name used by the CLI
        database: Database connection configuration
    """

    metadata_path: Path = Path("metadata")
    strict_hooks: bool = False
    log_level: str = "WARNING"
    database: DatabaseConfig = field(default_factory=lambda: DatabaseConfig(url="sqlite:///saveforge.db"))

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> Settings:
        """Create settings from environment variables.

        SAVEFORGE_METADATA_PATH, SAVEFORGE_STRICT_HOOKS and SAVEFORGE_LOG_LEVEL,
        plus the database variables read by DatabaseConfig.from_env().
        """
        base = base_path or Path.cwd()
        metadata_path = os.environ.get("SAVEFORGE_METADATA_PATH")

        return cls(
            metadata_path=Path(metadata_path) if metadata_path else base / "metadata",
            strict_hooks=os.environ.get("SAVEFORGE_STRICT_HOOKS", "").lower() in _TRUTHY,
            log_level=os.environ.get("SAVEFORGE_LOG_LEVEL", "WARNING").upper(),
            database=DatabaseConfig.from_env(base_path),
        )
