"""Field-level constraint validators.

These validators are generated from field metadata to enforce:
- required: Field must have a non-empty value
- min/max: Numeric bounds
- minLength/maxLength: String length bounds
- pattern: Regex pattern matching
"""

import re
from dataclasses import dataclass
from typing import Any

from saveforge.core.types import SaveMode
from saveforge.metadata.loader import EntityModel, FieldDefinition, ValidationRules
from saveforge.validation.types import ValidationContext, ValidationError


@dataclass
class FieldConstraintValidator:
    """Validates a single field against its metadata constraints."""

    field: FieldDefinition

    async def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        errors: list[ValidationError] = []

        field_name = self.field.name
        value = ctx.record.get(field_name)
        rules = self.field.validation

        # Primary keys are generated by the adapter on insert
        if self.field.primary_key and ctx.mode == SaveMode.INSERT:
            return errors

        if rules.required and self._is_empty(value):
            errors.append(ValidationError(
                message=f"{self.field.display_name} is required",
                code="REQUIRED",
                field=field_name,
            ))
            return errors

        # Optional and empty: nothing else to check
        if self._is_empty(value):
            return errors

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            errors.extend(self._validate_numeric_bounds(value, rules))

        if isinstance(value, str):
            errors.extend(self._validate_string_constraints(value, rules))

        return errors

    def _validate_numeric_bounds(
        self, value: float, rules: ValidationRules
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        label = self.field.display_name

        if rules.min is not None and value < rules.min:
            errors.append(ValidationError(
                message=f"{label} must be at least {rules.min}",
                code="MIN_VALUE",
                field=self.field.name,
            ))
        if rules.max is not None and value > rules.max:
            errors.append(ValidationError(
                message=f"{label} must be at most {rules.max}",
                code="MAX_VALUE",
                field=self.field.name,
            ))
        return errors

    def _validate_string_constraints(
        self, value: str, rules: ValidationRules
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        label = self.field.display_name

        if rules.min_length is not None and len(value) < rules.min_length:
            errors.append(ValidationError(
                message=f"{label} must be at least {rules.min_length} characters",
                code="MIN_LENGTH",
                field=self.field.name,
            ))
        if rules.max_length is not None and len(value) > rules.max_length:
            errors.append(ValidationError(
                message=f"{label} must be at most {rules.max_length} characters",
                code="MAX_LENGTH",
                field=self.field.name,
            ))
        if rules.pattern and not re.fullmatch(rules.pattern, value):
            errors.append(ValidationError(
                message=f"{label} has an invalid format",
                code="PATTERN_MISMATCH",
                field=self.field.name,
            ))
        return errors

    def _is_empty(self, value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, str) and value.strip() == "":
            return True
        return False


def _has_constraints(rules: ValidationRules) -> bool:
    return (
        rules.required
        or rules.min is not None
        or rules.max is not None
        or rules.min_length is not None
        or rules.max_length is not None
        or bool(rules.pattern)
    )


def generate_field_validators(entity: EntityModel) -> list[FieldConstraintValidator]:
    """Create one validator per field that declares constraints."""
    return [
        FieldConstraintValidator(field=f)
        for f in entity.fields
        if _has_constraints(f.validation)
    ]
