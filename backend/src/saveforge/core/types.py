"""Shared lifecycle types: save modes and caller context."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SaveMode(Enum):
    """The kind of persistence a save call performs.

    INSERT: the entity has never been persisted
    UPDATE: the entity already has a persisted identity
    """

    INSERT = "insert"
    UPDATE = "update"

    @classmethod
    def for_entity(cls, entity: Any) -> "SaveMode":
        """Resolve the mode from whether the entity was persisted before."""
        return cls.INSERT if entity.is_new else cls.UPDATE


ALL_MODES = (SaveMode.INSERT, SaveMode.UPDATE)


@dataclass
class UserContext:
    """Identity of the caller performing a save.

    Attributes:
        tenant_id: The tenant/client ID the user belongs to
        user_id: The authenticated user's ID
        roles: List of role names the user has
    """

    tenant_id: str | None = None
    user_id: str | None = None
    roles: list[str] = field(default_factory=list)


# Column storage type per field type; anything not listed is stored as TEXT
STORAGE_TYPES: dict[str, str] = {
    "integer": "INTEGER",
    "number": "REAL",
    "currency": "REAL",
    "percent": "REAL",
    "boolean": "INTEGER",
}


def get_storage_type(field_type: str) -> str:
    """Get the SQL storage type for a field type."""
    return STORAGE_TYPES.get(field_type, "TEXT")


def modes_from_dict(data: dict[Any, Any]) -> list[SaveMode]:
    """Read the `on:` mode filter of a hook or validator entry.

    PyYAML parses the bare key `on:` as boolean True, so both the string
    key and the boolean key are checked. A missing key means every mode;
    an explicit empty list means none.

    Raises:
        ValueError: If a mode name is not a SaveMode value
    """
    if "on" in data:
        modes = data["on"]
    elif True in data:
        modes = data[True]
    else:
        return list(ALL_MODES)

    if modes is None:
        return []
    if isinstance(modes, str):
        modes = [modes]
    return [SaveMode(m) for m in modes]
