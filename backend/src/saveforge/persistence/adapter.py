"""PersistenceAdapter Protocol: the data repository a save delegates to."""

from typing import Any, Protocol, runtime_checkable

from saveforge.metadata.loader import EntityModel


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Interface the save lifecycle uses to store records.

    insert() and update() return the stored row. update() returns None
    when no row with the given ID exists.
    """

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def initialize_entity(self, entity: EntityModel) -> None: ...

    def insert(self, entity: EntityModel, data: dict[str, Any]) -> dict[str, Any]: ...

    def update(
        self, entity: EntityModel, id: str, data: dict[str, Any]
    ) -> dict[str, Any] | None: ...

    def get(self, entity: EntityModel, id: str) -> dict[str, Any] | None: ...
