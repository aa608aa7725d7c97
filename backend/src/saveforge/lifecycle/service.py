"""Save lifecycle dispatcher for SaveForge.

Runs one save call through its fixed sequence of steps:

1. onValidating hooks (fix up / derive record values)
2. Validate (field constraints, then named validators)
3. onSaving hooks (may cancel)
4. Persist (adapter insert or update)
5. onSaved hooks (side effects, after successful persistence)

Each step is awaited before the next starts. Validation failure and
cancellation end the call without persisting and are returned as values;
exceptions from hooks and validators propagate unchanged.
"""

import logging
from types import MappingProxyType
from typing import Any

from saveforge.core.errors import PersistenceError, ReentrantSaveError
from saveforge.core.types import SaveMode, UserContext
from saveforge.hooks.service import HookService
from saveforge.hooks.types import HookContext
from saveforge.lifecycle.entity import Entity
from saveforge.lifecycle.integration import (
    get_hook_definitions,
    get_validator_definitions,
)
from saveforge.lifecycle.types import SaveOutcome, SaveResult
from saveforge.persistence.adapter import PersistenceAdapter
from saveforge.validation.field_constraints import generate_field_validators
from saveforge.validation.services import ValidationService
from saveforge.validation.types import ValidationContext, ValidationFailure

logger = logging.getLogger(__name__)


class SaveService:
    """Dispatches the save lifecycle for entities.

    Holds no per-call state; concurrent saves of different entities are
    independent. Saving an entity from inside one of its own hooks raises
    ReentrantSaveError.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        hook_service: HookService | None = None,
        validation_service: ValidationService | None = None,
        services: Any = None,
    ):
        self.adapter = adapter
        self.hook_service = hook_service or HookService()
        self.validation_service = validation_service or ValidationService()
        # Handed to hooks as HookContext.services
        self.services = services

    @classmethod
    def from_settings(
        cls, adapter: PersistenceAdapter, settings: Any, services: Any = None
    ) -> "SaveService":
        """Build a service honouring Settings.strict_hooks."""
        return cls(
            adapter,
            hook_service=HookService(strict=settings.strict_hooks),
            validation_service=ValidationService(strict=settings.strict_hooks),
            services=services,
        )

    async def save(
        self,
        entity: Entity,
        mode: SaveMode | None = None,
        user_context: UserContext | None = None,
    ) -> SaveResult:
        """Run the save lifecycle for an entity.

        Args:
            entity: The entity to save; updated in place on success
            mode: INSERT or UPDATE; resolved from the entity when omitted
            user_context: Caller identity passed to hooks and validators

        Returns:
            SaveResult with outcome SAVED, INVALID or CANCELLED

        Raises:
            ReentrantSaveError: The entity is already being saved
            PersistenceError: The adapter failed to store the record
        """
        if entity.saving:
            raise ReentrantSaveError(
                f"{entity!r} is already being saved; hooks must not save "
                "the entity that triggered them"
            )
        if entity.model.abstract:
            raise ValueError(f"Entity '{entity.name}' is abstract and cannot be saved")

        resolved_mode = mode or SaveMode.for_entity(entity)
        entity.saving = True
        try:
            return await self._run(entity, resolved_mode, user_context)
        finally:
            entity.saving = False

    async def _run(
        self,
        entity: Entity,
        mode: SaveMode,
        user_context: UserContext | None,
    ) -> SaveResult:
        model = entity.model
        ctx = HookContext(
            entity_name=model.name,
            mode=mode,
            record=entity.record,
            original=entity.original,
            changes=entity.changes,
            user_context=user_context,
            services=self.services,
        )

        logger.debug("Saving %s (%s): validating", model.name, mode.value)
        await self.hook_service.run_hooks(
            "onValidating", get_hook_definitions(model, "onValidating"), ctx
        )
        entity.record = ctx.record

        validation_ctx = ValidationContext(
            entity_name=model.name,
            record=MappingProxyType(entity.record),
            mode=mode,
            user_context=user_context,
            original_record=(
                MappingProxyType(entity.original) if entity.original is not None else None
            ),
            entity_metadata=model,
        )
        errors = await self.validation_service.validate(
            validation_ctx,
            get_validator_definitions(model),
            generate_field_validators(model),
        )
        if errors:
            failure = ValidationFailure.from_errors(errors)
            logger.info("Save of %s rejected by validation: %s", model.name, failure.message)
            return SaveResult(outcome=SaveOutcome.INVALID, mode=mode, failure=failure)

        logger.debug("Saving %s (%s): validated", model.name, mode.value)
        ctx.changes = entity.changes
        hook_result = await self.hook_service.run_hooks(
            "onSaving", get_hook_definitions(model, "onSaving"), ctx
        )
        entity.record = ctx.record
        if hook_result is not None and hook_result.cancel is not None:
            logger.info("Save of %s cancelled: %s", model.name, hook_result.cancel)
            return SaveResult(
                outcome=SaveOutcome.CANCELLED,
                mode=mode,
                cancel_reason=hook_result.cancel,
            )

        logger.debug("Saving %s (%s): persisting", model.name, mode.value)
        saved = self._persist(entity, mode)
        entity.mark_persisted(saved)

        ctx.record = entity.record
        await self.hook_service.run_hooks(
            "onSaved", get_hook_definitions(model, "onSaved"), ctx
        )

        logger.debug("Saved %s %s (%s)", model.name, entity.id, mode.value)
        return SaveResult(outcome=SaveOutcome.SAVED, mode=mode, record=dict(entity.record))

    def _persist(self, entity: Entity, mode: SaveMode) -> dict[str, Any]:
        """Store the record through the adapter, wrapping adapter failures."""
        model = entity.model
        try:
            if mode == SaveMode.INSERT:
                saved = self.adapter.insert(model, entity.record)
            else:
                if entity.id is None:
                    raise PersistenceError(model.name, "cannot update a record without an ID")
                saved = self.adapter.update(model, entity.id, entity.record)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(model.name, str(e)) from e

        if saved is None:
            raise PersistenceError(model.name, f"no stored record with ID '{entity.id}'")
        return saved
