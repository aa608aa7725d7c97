"""SaveForge entity lifecycle hook system.

Provides extension points for logic that runs at fixed points
in the entity save lifecycle:
- onValidating: Before validation (fix up / derive field values)
- onSaving: After validation, before persist (can modify record, can cancel)
- onSaved: After persist (side effects such as notifications)

Usage:
    from saveforge.hooks import hook, HookContext, HookResult

    @hook("deriveFriendlyName")
    async def derive_friendly_name(ctx: HookContext) -> HookResult | None:
        if not ctx.record.get("friendlyName"):
            return HookResult(update={"friendlyName": ctx.record.get("officialName")})
        return None
"""

from saveforge.hooks.registry import HookFn, HookRegistry, hook
from saveforge.hooks.service import HookService
from saveforge.hooks.types import (
    CANCELLABLE_HOOK_POINTS,
    VALID_HOOK_POINTS,
    HookContext,
    HookDefinition,
    HookResult,
    compute_changes,
)

__all__ = [
    "CANCELLABLE_HOOK_POINTS",
    "HookContext",
    "HookDefinition",
    "HookFn",
    "HookRegistry",
    "HookResult",
    "HookService",
    "VALID_HOOK_POINTS",
    "compute_changes",
    "hook",
]
