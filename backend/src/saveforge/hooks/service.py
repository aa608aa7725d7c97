"""Hook execution service for SaveForge.

Runs the hooks declared for one lifecycle point: mode filtering,
sequential ordering, update merging and cancellation.
"""

import inspect
import logging
from typing import Any

from saveforge.core.errors import HookNotRegisteredError
from saveforge.hooks.registry import HookRegistry
from saveforge.hooks.types import (
    CANCELLABLE_HOOK_POINTS,
    HookContext,
    HookDefinition,
    HookResult,
)

logger = logging.getLogger(__name__)


class HookService:
    """Orchestrates hook execution for one lifecycle point.

    Hooks within a hook point execute sequentially in declared order.
    Each hook's update output is merged into the record before the next
    hook runs. Exceptions raised by hooks propagate to the caller.
    """

    def __init__(self, strict: bool = False):
        # strict: unregistered hook names raise instead of being skipped
        self.strict = strict

    async def run_hooks(
        self,
        hook_point: str,
        definitions: list[HookDefinition],
        context: HookContext,
    ) -> HookResult | None:
        """Execute hooks for a given hook point.

        Args:
            hook_point: The lifecycle point (onValidating, onSaving, onSaved)
            definitions: Hook definitions from entity metadata (in declared order)
            context: The hook context with current record state

        Returns:
            Merged HookResult with all updates applied, or None if no hook
            produced output. If a hook cancels at a cancellable point, returns
            immediately with the cancel reason.
        """
        if not definitions:
            return None

        can_cancel = hook_point in CANCELLABLE_HOOK_POINTS
        merged_updates: dict[str, Any] = {}

        for definition in definitions:
            if context.mode not in definition.on:
                continue

            try:
                hook_fn = HookRegistry.get(definition.name)
            except HookNotRegisteredError:
                if self.strict:
                    raise
                logger.warning(
                    "Hook '%s' is not registered, skipping", definition.name
                )
                continue

            logger.debug(
                "Running %s hook '%s' for %s",
                hook_point,
                definition.name,
                context.entity_name,
            )
            result = hook_fn(context)
            if inspect.isawaitable(result):
                result = await result

            if result is None:
                continue

            if result.update:
                context.record.update(result.update)
                merged_updates.update(result.update)

            if result.cancel is not None:
                if can_cancel:
                    return HookResult(
                        update=merged_updates or None, cancel=result.cancel
                    )
                logger.warning(
                    "%s hook '%s' returned cancel (%s); only %s hooks may cancel",
                    hook_point,
                    definition.name,
                    result.cancel,
                    ", ".join(CANCELLABLE_HOOK_POINTS),
                )

        if merged_updates:
            return HookResult(update=merged_updates)

        return None
