"""Exception hierarchy for SaveForge."""


class SaveForgeError(Exception):
    """Base class for all SaveForge runtime errors."""


class PersistenceError(SaveForgeError):
    """The persistence step of a save failed.

    The underlying adapter exception is available as ``__cause__``.
    """

    def __init__(self, entity_name: str, message: str):
        self.entity_name = entity_name
        super().__init__(f"Persisting '{entity_name}' failed: {message}")


class ReentrantSaveError(SaveForgeError):
    """A hook tried to save the entity that is currently being saved."""


class HookNotRegisteredError(SaveForgeError, ValueError):
    """Entity metadata references a hook name nobody registered."""


class ValidatorNotRegisteredError(SaveForgeError, ValueError):
    """Entity metadata references a validator type nobody registered."""
