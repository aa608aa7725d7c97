"""Hook registry for SaveForge.

Provides registration and lookup for hook implementations.
Follows the same pattern as ValidatorRegistry.
"""

from collections.abc import Awaitable, Callable

from saveforge.core.errors import HookNotRegisteredError
from saveforge.hooks.types import HookContext, HookResult

# Hook function signature: (HookContext) -> HookResult | None, sync or async
HookFn = Callable[[HookContext], Awaitable[HookResult | None] | HookResult | None]


class HookRegistry:
    """Registry for hook implementations.

    Hooks must be explicitly registered before entity metadata can
    reference them. Registration is typically done at application
    startup via the @hook decorator.

    Example:
        @hook("deriveFriendlyName")
        async def derive_friendly_name(ctx: HookContext) -> HookResult:
            ...
    """

    _hooks: dict[str, HookFn] = {}

    @classmethod
    def register(cls, name: str, hook_fn: HookFn) -> None:
        """Register a hook function by name.

        Idempotent: re-registering the same name is a no-op.

        Args:
            name: Unique identifier for the hook
            hook_fn: Function implementing the hook
        """
        if name in cls._hooks:
            return
        cls._hooks[name] = hook_fn

    @classmethod
    def get(cls, name: str) -> HookFn:
        """Get a registered hook function by name.

        Raises:
            HookNotRegisteredError: If hook is not registered
        """
        if name not in cls._hooks:
            raise HookNotRegisteredError(
                f"Hook '{name}' is not registered. "
                "Hooks must be explicitly registered at application startup."
            )
        return cls._hooks[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a hook is registered."""
        return name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered hook names."""
        return sorted(cls._hooks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._hooks.clear()


def hook(name: str) -> Callable[[HookFn], HookFn]:
    """Decorator to register a hook function.

    Usage:
        @hook("notifyCreated")
        async def notify_created(ctx: HookContext) -> None:
            ...
    """

    def decorator(fn: HookFn) -> HookFn:
        HookRegistry.register(name, fn)
        return fn

    return decorator
