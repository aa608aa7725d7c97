"""Validator registry for SaveForge.

Applications register validators by name, either as classes implementing
the Validator protocol, as factories configured from a ValidatorDefinition,
or as plain functions via the @validator decorator.
"""

import inspect
from collections.abc import Callable
from typing import Any

from saveforge.core.errors import ValidatorNotRegisteredError
from saveforge.validation.messages import MessageInterpolator
from saveforge.validation.types import (
    ValidationContext,
    ValidationError,
    Validator,
    ValidatorDefinition,
)

# Function validator signature: (ctx, params) -> list[ValidationError] | None, sync or async
ValidatorFn = Callable[[ValidationContext, dict[str, Any]], Any]


class ValidatorRegistry:
    """Registry for validator types.

    Example:
        ValidatorRegistry.register("myapp.OrderValidator", OrderValidator)

        validator = ValidatorRegistry.create(ValidatorDefinition(type="myapp.OrderValidator"))
    """

    _validators: dict[str, type[Validator]] = {}
    _factories: dict[str, Callable[[ValidatorDefinition], Validator]] = {}

    @classmethod
    def register(cls, name: str, validator_class: type[Validator]) -> None:
        """Register a validator class by name.

        Idempotent - re-registering the same name is a no-op.
        """
        if name in cls._validators:
            return
        cls._validators[name] = validator_class

    @classmethod
    def register_factory(
        cls,
        name: str,
        factory: Callable[[ValidatorDefinition], Validator],
    ) -> None:
        """Register a factory that builds validators from definitions.

        Idempotent - re-registering the same name is a no-op.
        """
        if name in cls._factories:
            return
        cls._factories[name] = factory

    @classmethod
    def create(
        cls,
        definition: ValidatorDefinition,
        interpolator: MessageInterpolator | None = None,
    ) -> Validator:
        """Create a configured validator instance from a definition.

        The definition message is a template rendered by the interpolator
        (by default one built from the entity metadata at validation time).

        Raises:
            ValidatorNotRegisteredError: If the type is not registered
        """
        validator_type = definition.type

        if validator_type in cls._factories:
            inner = cls._factories[validator_type](definition)
        elif validator_type in cls._validators:
            inner = cls._validators[validator_type]()
        else:
            raise ValidatorNotRegisteredError(
                f"Validator type '{validator_type}' is not registered. "
                "Available types: " + ", ".join(cls.list_registered())
            )

        return ConfiguredValidator(definition, inner, interpolator)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._validators or name in cls._factories

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(set(cls._validators.keys()) | set(cls._factories.keys()))

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._validators.clear()
        cls._factories.clear()


class FunctionValidator:
    """Adapts a plain validation function to the Validator protocol."""

    def __init__(self, fn: ValidatorFn, params: dict[str, Any]):
        self.fn = fn
        self.params = params

    async def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        result = self.fn(ctx, self.params)
        if inspect.isawaitable(result):
            result = await result
        return list(result or [])


class ConfiguredValidator:
    """A validator configured from a ValidatorDefinition.

    Fills in the definition's message and code on errors that leave them
    blank. Only the definition message is treated as a template; messages
    returned by the validator are passed through untouched.
    """

    def __init__(
        self,
        definition: ValidatorDefinition,
        inner: Validator,
        interpolator: MessageInterpolator | None = None,
    ):
        self.definition = definition
        self.inner = inner
        self.interpolator = interpolator

    def render_message(self, ctx: ValidationContext) -> str:
        if not self.definition.message:
            return ""
        interpolator = self.interpolator or MessageInterpolator.for_entity(
            ctx.entity_metadata
        )
        return interpolator.interpolate(
            self.definition.message, ctx.record, ctx.original_record
        )

    async def validate(self, ctx: ValidationContext) -> list[ValidationError]:
        errors = await self.inner.validate(ctx)
        return [
            ValidationError(
                message=error.message or self.render_message(ctx),
                code=error.code or self.definition.code,
                field=error.field,
            )
            for error in errors
        ]


def validator(name: str) -> Callable[[ValidatorFn], ValidatorFn]:
    """Decorator to register a function validator.

    Usage:
        @validator("uniqueOfficialName")
        async def unique_official_name(ctx, params):
            if ctx.record["officialName"] in taken:
                return [ValidationError("Official name already in use", field="officialName")]
            return []
    """

    def decorator(fn: ValidatorFn) -> ValidatorFn:
        ValidatorRegistry.register_factory(
            name, lambda definition: FunctionValidator(fn, definition.params)
        )
        return fn

    return decorator
