"""SaveForge save lifecycle.

Usage:
    from saveforge.lifecycle import Entity, SaveService

    service = SaveService(adapter)
    result = await service.save(Entity(model, {"officialName": "Acme Ltd"}))
    if result.outcome is SaveOutcome.INVALID:
        print(result.failure.message)
"""

from saveforge.core.errors import (
    HookNotRegisteredError,
    PersistenceError,
    ReentrantSaveError,
    SaveForgeError,
    ValidatorNotRegisteredError,
)
from saveforge.core.types import SaveMode, UserContext
from saveforge.lifecycle.entity import Entity
from saveforge.lifecycle.service import SaveService
from saveforge.lifecycle.types import SaveOutcome, SaveResult
from saveforge.validation.types import ValidationFailure

__all__ = [
    "Entity",
    "HookNotRegisteredError",
    "PersistenceError",
    "ReentrantSaveError",
    "SaveForgeError",
    "SaveMode",
    "SaveOutcome",
    "SaveResult",
    "SaveService",
    "UserContext",
    "ValidationFailure",
    "ValidatorNotRegisteredError",
]
