"""Persistence layer - the data repository saves are delegated to."""

from saveforge.persistence.adapter import PersistenceAdapter
from saveforge.persistence.config import DatabaseConfig, create_adapter

__all__ = ["PersistenceAdapter", "DatabaseConfig", "create_adapter"]
