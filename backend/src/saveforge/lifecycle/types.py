"""Save call results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from saveforge.core.types import SaveMode
from saveforge.validation.types import ValidationFailure


class SaveOutcome(Enum):
    """The three disjoint outcomes of a save call."""

    SAVED = "saved"
    INVALID = "invalid"
    CANCELLED = "cancelled"


@dataclass
class SaveResult:
    """Result of SaveService.save().

    Attributes:
        outcome: SAVED, INVALID or CANCELLED
        mode: The resolved save mode
        record: The stored row (SAVED only)
        failure: Validation failure (INVALID only)
        cancel_reason: Reason given by the cancelling hook (CANCELLED only)
    """

    outcome: SaveOutcome
    mode: SaveMode
    record: dict[str, Any] | None = None
    failure: ValidationFailure | None = None
    cancel_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == SaveOutcome.SAVED

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "outcome": self.outcome.value,
            "mode": self.mode.value,
        }
        if self.record is not None:
            result["record"] = self.record
        if self.failure is not None:
            result["failure"] = self.failure.to_dict()
        if self.cancel_reason is not None:
            result["cancelReason"] = self.cancel_reason
        return result
