"""Core types for the SaveForge validation step.

Validation runs in two layers:
- Field constraints generated from field metadata (required, bounds, pattern)
- Named validators registered by the application and declared on the entity
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from saveforge.core.types import ALL_MODES, SaveMode, UserContext, modes_from_dict


@dataclass(frozen=True)
class ValidationError:
    """A single validation error.

    Attributes:
        message: Human-readable message (may contain interpolated field values)
        code: Machine-readable error code (e.g., "REQUIRED")
        field: Field name this error relates to, or None for entity-level errors
    """

    message: str
    code: str = ""
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "field": self.field,
        }


@dataclass
class ValidationFailure:
    """Why an entity's state is unfit for persistence.

    Collects every error raised during the validation step.
    """

    message: str
    errors: list[ValidationError] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> "ValidationFailure":
        return cls(message="; ".join(e.message for e in errors), errors=list(errors))

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class ValidationContext:
    """Context passed to validators.

    Attributes:
        entity_name: Name of the entity being validated
        record: Read-only view of the record (after onValidating hooks ran)
        mode: INSERT or UPDATE
        user_context: Caller identity (None when not supplied)
        original_record: Last persisted state for UPDATE; None for INSERT
        entity_metadata: The EntityModel being validated
    """

    entity_name: str
    record: Mapping[str, Any]
    mode: SaveMode
    user_context: UserContext | None = None
    original_record: Mapping[str, Any] | None = None
    entity_metadata: Any = None  # EntityModel, but avoiding circular import


class Validator(Protocol):
    """Protocol that all validators must implement.

    Validators must not mutate the record; they only report errors.
    """

    async def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        """Return validation errors. Empty list means valid."""
        ...


@dataclass
class ValidatorDefinition:
    """Declarative validator reference from entity metadata.

    Attributes:
        type: Registered validator name
        params: Type-specific parameters
        message: Default error message template (supports interpolation)
        code: Default machine-readable error code
        on: Save modes this validator runs on
    """

    type: str
    params: dict[str, Any] = field(default_factory=dict)
    message: str = ""
    code: str = ""
    on: list[SaveMode] = field(default_factory=lambda: list(ALL_MODES))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidatorDefinition":
        """Create ValidatorDefinition from YAML/JSON dict."""
        return cls(
            type=data["type"],
            params=data.get("params", {}),
            message=data.get("message", ""),
            code=data.get("code", ""),
            on=modes_from_dict(data),
        )
