"""Entity instances handed to the save lifecycle."""

from typing import Any

from saveforge.hooks.types import compute_changes
from saveforge.metadata.loader import EntityModel


class Entity:
    """A record of a metadata-described entity type.

    Holds the working record plus a snapshot of the last persisted state.
    An entity with no snapshot has never been saved and will be inserted.
    """

    def __init__(
        self,
        model: EntityModel,
        data: dict[str, Any] | None = None,
        original: dict[str, Any] | None = None,
    ):
        self.model = model
        self.record: dict[str, Any] = {
            f.name: f.default for f in model.fields if f.default is not None
        }
        self.record.update(data or {})
        self.original = dict(original) if original is not None else None
        # Set by SaveService while a save of this entity is in progress
        self.saving = False

    @classmethod
    def from_persisted(cls, model: EntityModel, row: dict[str, Any]) -> "Entity":
        """Wrap a row loaded from storage as a clean, persisted entity."""
        return cls(model, row, original=row)

    @property
    def name(self) -> str:
        return self.model.name

    @property
    def id(self) -> Any:
        return self.record.get(self.model.primary_key)

    @property
    def is_new(self) -> bool:
        return self.original is None

    @property
    def changes(self) -> dict[str, Any] | None:
        return compute_changes(self.record, self.original)

    @property
    def is_dirty(self) -> bool:
        return self.is_new or bool(self.changes)

    def mark_persisted(self, row: dict[str, Any]) -> None:
        """Adopt the stored row as both working record and snapshot."""
        self.record = dict(row)
        self.original = dict(row)

    def get(self, key: str, default: Any = None) -> Any:
        return self.record.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.record[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.record[key] = value

    def __repr__(self) -> str:
        state = "new" if self.is_new else ("dirty" if self.is_dirty else "clean")
        return f"<Entity {self.name} id={self.id!r} {state}>"
