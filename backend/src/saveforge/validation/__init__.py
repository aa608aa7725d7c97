"""SaveForge validation step.

Usage:
    from saveforge.validation import validator, ValidationError

    @validator("uniqueOfficialName")
    async def unique_official_name(ctx, params):
        ...
"""

from saveforge.validation.field_constraints import (
    FieldConstraintValidator,
    generate_field_validators,
)
from saveforge.validation.registry import (
    ConfiguredValidator,
    FunctionValidator,
    ValidatorRegistry,
    validator,
)
from saveforge.validation.messages import MessageInterpolator
from saveforge.validation.services import ValidationService
from saveforge.validation.types import (
    ValidationContext,
    ValidationError,
    ValidationFailure,
    Validator,
    ValidatorDefinition,
)

__all__ = [
    # Types
    "ValidationContext",
    "ValidationError",
    "ValidationFailure",
    "Validator",
    "ValidatorDefinition",
    # Registry
    "ConfiguredValidator",
    "FunctionValidator",
    "ValidatorRegistry",
    "validator",
    # Field constraints
    "FieldConstraintValidator",
    "generate_field_validators",
    # Services
    "MessageInterpolator",
    "ValidationService",
]
