"""Validation service for SaveForge.

Runs field constraint validators and named validators for one save and
collects every error they report.
"""

import logging

from saveforge.core.errors import ValidatorNotRegisteredError
from saveforge.validation.messages import MessageInterpolator
from saveforge.validation.registry import ValidatorRegistry
from saveforge.validation.types import (
    ValidationContext,
    ValidationError,
    Validator,
    ValidatorDefinition,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Validation Service
# =============================================================================


class ValidationService:
    """Runs the validation step of a save.

    Field constraint validators run first, then named validators in
    declared order. Every validator runs and all errors are collected.
    Exceptions raised by validators propagate.
    """

    def __init__(
        self,
        message_interpolator: MessageInterpolator | None = None,
        strict: bool = False,
    ):
        # Renders metadata message templates; None builds one from the entity labels
        self.message_interpolator = message_interpolator
        # strict: unregistered validator types raise instead of being skipped
        self.strict = strict

    async def validate(
        self,
        ctx: ValidationContext,
        definitions: list[ValidatorDefinition],
        field_validators: list[Validator] | None = None,
    ) -> list[ValidationError]:
        """Validate a record.

        Args:
            ctx: Validation context with record, mode, user info
            definitions: Validator definitions from entity metadata
            field_validators: Field constraint validators

        Returns:
            All validation errors. Empty means valid.
        """
        validators = list(field_validators or [])
        validators.extend(self._create_validators(definitions, ctx))

        errors: list[ValidationError] = []
        for v in validators:
            errors.extend(await v.validate(ctx))

        return errors

    def _create_validators(
        self,
        definitions: list[ValidatorDefinition],
        ctx: ValidationContext,
    ) -> list[Validator]:
        """Create validator instances applicable to the current mode."""
        validators: list[Validator] = []

        for definition in definitions:
            if ctx.mode not in definition.on:
                continue

            try:
                validators.append(ValidatorRegistry.create(definition, self.message_interpolator))
            except ValidatorNotRegisteredError:
                if self.strict:
                    raise
                logger.warning(
                    "Validator '%s' declared on %s is not registered, skipping",
                    definition.type,
                    ctx.entity_name,
                )

        return validators

