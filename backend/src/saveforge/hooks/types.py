"""Hook system types for SaveForge.

Defines the core data structures for the save lifecycle hook system:
- HookDefinition: metadata describing when a hook should run
- HookContext: runtime state passed to hook functions
- HookResult: return value from hook functions
"""

from dataclasses import dataclass, field
from typing import Any

from saveforge.core.types import ALL_MODES, SaveMode, UserContext, modes_from_dict

# Ordered as they run during a save
VALID_HOOK_POINTS = ("onValidating", "onSaving", "onSaved")

# Hook points whose hooks may cancel the save
CANCELLABLE_HOOK_POINTS = ("onSaving",)


@dataclass
class HookDefinition:
    """Definition of a hook from entity metadata.

    Attributes:
        name: Registered hook name (e.g., "deriveFriendlyName")
        on: Save modes this hook applies to (insert, update)
        description: Human-readable description
    """

    name: str
    on: list[SaveMode] = field(default_factory=lambda: list(ALL_MODES))
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HookDefinition":
        """Create HookDefinition from YAML/JSON dict."""
        return cls(
            name=data["name"],
            on=modes_from_dict(data),
            description=data.get("description", ""),
        )


@dataclass
class HookContext:
    """Runtime context passed to every hook function.

    Attributes:
        entity_name: Name of the entity being saved
        mode: INSERT or UPDATE, fixed for the whole save call
        record: Current record state; hooks may mutate it in onValidating/onSaving
        original: Last persisted record state (None for insert)
        changes: Dict of changed fields (update only, None for insert)
        user_context: Caller identity
        services: Application-supplied services (notification senders etc.)
    """

    entity_name: str
    mode: SaveMode
    record: dict[str, Any]
    original: dict[str, Any] | None = None
    changes: dict[str, Any] | None = None
    user_context: UserContext | None = None
    services: Any = None


@dataclass
class HookResult:
    """Return value from hook functions.

    Attributes:
        update: Fields to merge into the record
        cancel: Reason to cancel the save (honoured for onSaving only)
    """

    update: dict[str, Any] | None = None
    cancel: str | None = None


def compute_changes(
    record: dict[str, Any], original: dict[str, Any] | None
) -> dict[str, Any] | None:
    """Compute a diff of changed fields between record and original.

    Returns None if original is None (never persisted).
    Returns a dict of {field: new_value} for fields that differ.
    """
    if original is None:
        return None

    changes: dict[str, Any] = {}
    for key, value in record.items():
        if key not in original or original[key] != value:
            changes[key] = value

    return changes
