"""Tests for the save lifecycle hook system."""

import pytest

from saveforge.core.errors import HookNotRegisteredError
from saveforge.core.types import SaveMode, UserContext
from saveforge.hooks import (
    CANCELLABLE_HOOK_POINTS,
    HookContext,
    HookDefinition,
    HookRegistry,
    HookResult,
    HookService,
    VALID_HOOK_POINTS,
    compute_changes,
    hook,
)
from saveforge.lifecycle.integration import hook_config_to_definition
from saveforge.metadata.loader import HookConfig


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clear_hook_registry():
    """Clear hook registry before and after each test."""
    HookRegistry.clear()
    yield
    HookRegistry.clear()


@pytest.fixture
def hook_service():
    return HookService()


@pytest.fixture
def insert_context():
    """A HookContext for a first-time save."""
    return HookContext(
        entity_name="Organisation",
        mode=SaveMode.INSERT,
        record={"officialName": "Acme Holdings Ltd", "friendlyName": "", "status": "active"},
        user_context=UserContext(user_id="U001", tenant_id="T001", roles=["user"]),
    )


@pytest.fixture
def update_context():
    """A HookContext for update saves."""
    original = {"id": "ORG-00001", "officialName": "Acme Holdings Ltd", "status": "active"}
    record = {"id": "ORG-00001", "officialName": "Acme Group Ltd", "status": "active"}
    return HookContext(
        entity_name="Organisation",
        mode=SaveMode.UPDATE,
        record=record,
        original=original,
        changes=compute_changes(record, original),
    )


# =============================================================================
# compute_changes tests
# =============================================================================


class TestComputeChanges:
    def test_returns_none_when_never_persisted(self):
        assert compute_changes({"a": 1}, None) is None

    def test_detects_changed_fields(self):
        changes = compute_changes({"a": 1, "b": 99, "c": 3}, {"a": 1, "b": 2, "c": 3})
        assert changes == {"b": 99}

    def test_detects_new_fields(self):
        assert compute_changes({"a": 1, "b": 2}, {"a": 1}) == {"b": 2}

    def test_empty_when_no_changes(self):
        record = {"a": 1, "b": 2}
        assert compute_changes(record, dict(record)) == {}


# =============================================================================
# HookRegistry tests
# =============================================================================


class TestHookRegistry:
    def test_register_and_get(self):
        async def my_hook(ctx):
            return None

        HookRegistry.register("myHook", my_hook)
        assert HookRegistry.get("myHook") is my_hook

    def test_register_idempotent(self):
        async def hook_a(ctx):
            return None

        async def hook_b(ctx):
            return None

        HookRegistry.register("myHook", hook_a)
        HookRegistry.register("myHook", hook_b)  # should be no-op
        assert HookRegistry.get("myHook") is hook_a

    def test_get_unknown_raises(self):
        with pytest.raises(HookNotRegisteredError, match="not registered"):
            HookRegistry.get("nonExistent")

    def test_unknown_error_is_value_error(self):
        with pytest.raises(ValueError):
            HookRegistry.get("nonExistent")

    def test_list_registered_sorted(self):
        HookRegistry.register("beta", lambda ctx: None)
        HookRegistry.register("alpha", lambda ctx: None)
        assert HookRegistry.list_registered() == ["alpha", "beta"]

    def test_clear(self):
        HookRegistry.register("myHook", lambda ctx: None)
        HookRegistry.clear()
        assert not HookRegistry.is_registered("myHook")
        assert HookRegistry.list_registered() == []


class TestHookDecorator:
    def test_decorator_registers(self):
        @hook("decoratedHook")
        async def my_decorated_hook(ctx):
            return HookResult(update={"x": 1})

        assert HookRegistry.get("decoratedHook") is my_decorated_hook

    def test_decorator_preserves_function(self):
        @hook("preserveTest")
        async def original_fn(ctx):
            return None

        assert original_fn.__name__ == "original_fn"


# =============================================================================
# HookDefinition tests
# =============================================================================


class TestHookDefinition:
    def test_from_dict_defaults(self):
        defn = HookDefinition.from_dict({"name": "testHook"})
        assert defn.name == "testHook"
        assert defn.on == [SaveMode.INSERT, SaveMode.UPDATE]
        assert defn.description == ""

    def test_from_dict_full(self):
        defn = HookDefinition.from_dict({
            "name": "testHook",
            "on": ["insert"],
            "description": "A test hook",
        })
        assert defn.on == [SaveMode.INSERT]
        assert defn.description == "A test hook"

    def test_from_dict_string_on(self):
        defn = HookDefinition.from_dict({"name": "testHook", "on": "update"})
        assert defn.on == [SaveMode.UPDATE]

    def test_from_dict_unknown_mode_raises(self):
        with pytest.raises(ValueError):
            HookDefinition.from_dict({"name": "testHook", "on": "delete"})

    def test_from_dict_yaml_boolean_on_key(self):
        defn = HookDefinition.from_dict({"name": "testHook", True: ["insert"]})
        assert defn.on == [SaveMode.INSERT]

    def test_from_dict_empty_on_means_no_modes(self):
        assert HookDefinition.from_dict({"name": "testHook", "on": []}).on == []

    def test_hook_config_to_definition(self):
        config = HookConfig(name="notifyCreated", on=["insert"], description="Notify")
        defn = hook_config_to_definition(config)
        assert defn.name == "notifyCreated"
        assert defn.on == [SaveMode.INSERT]
        assert defn.description == "Notify"


# =============================================================================
# HookService tests
# =============================================================================


class TestHookService:
    @pytest.mark.asyncio
    async def test_empty_definitions_returns_none(self, hook_service, insert_context):
        assert await hook_service.run_hooks("onValidating", [], insert_context) is None

    @pytest.mark.asyncio
    async def test_hook_receives_context(self, hook_service, insert_context):
        received = []

        async def capture_ctx(ctx):
            received.append(ctx)

        HookRegistry.register("captureCtx", capture_ctx)
        await hook_service.run_hooks(
            "onValidating", [HookDefinition(name="captureCtx")], insert_context
        )
        assert received == [insert_context]
        assert received[0].mode == SaveMode.INSERT

    @pytest.mark.asyncio
    async def test_mode_filtering(self, hook_service, insert_context):
        """Hooks with non-matching on: are skipped."""
        calls = []
        HookRegistry.register("updateOnly", lambda ctx: calls.append(ctx))

        defn = HookDefinition(name="updateOnly", on=[SaveMode.UPDATE])
        await hook_service.run_hooks("onSaving", [defn], insert_context)
        assert calls == []

    @pytest.mark.asyncio
    async def test_sequential_execution_order(self, hook_service, insert_context):
        order = []

        for name in ("a", "b", "c"):
            async def record_call(ctx, name=name):
                order.append(name)

            HookRegistry.register(f"hook_{name}", record_call)

        defs = [HookDefinition(name=f"hook_{n}") for n in ("a", "b", "c")]
        await hook_service.run_hooks("onValidating", defs, insert_context)
        assert order == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_sync_hooks_supported(self, hook_service, insert_context):
        HookRegistry.register("syncHook", lambda ctx: HookResult(update={"synced": True}))

        result = await hook_service.run_hooks(
            "onValidating", [HookDefinition(name="syncHook")], insert_context
        )
        assert result.update == {"synced": True}
        assert insert_context.record["synced"] is True

    @pytest.mark.asyncio
    async def test_compounding_updates(self, hook_service, insert_context):
        """Later hooks see updates made by earlier ones."""
        async def hook_a(ctx):
            return HookResult(update={"computed_a": "A"})

        async def hook_b(ctx):
            return HookResult(update={"computed_b": f"B+{ctx.record['computed_a']}"})

        HookRegistry.register("hookA", hook_a)
        HookRegistry.register("hookB", hook_b)

        result = await hook_service.run_hooks(
            "onValidating",
            [HookDefinition(name="hookA"), HookDefinition(name="hookB")],
            insert_context,
        )
        assert result.update == {"computed_a": "A", "computed_b": "B+A"}
        assert insert_context.record["computed_b"] == "B+A"

    @pytest.mark.asyncio
    async def test_cancel_stops_execution_on_saving(self, hook_service, insert_context):
        order = []

        async def hook_a(ctx):
            order.append("a")
            return HookResult(update={"touched": True}, cancel="Blocked by hook A")

        async def hook_b(ctx):
            order.append("b")

        HookRegistry.register("hookA", hook_a)
        HookRegistry.register("hookB", hook_b)

        result = await hook_service.run_hooks(
            "onSaving",
            [HookDefinition(name="hookA"), HookDefinition(name="hookB")],
            insert_context,
        )
        assert result.cancel == "Blocked by hook A"
        assert result.update == {"touched": True}
        assert order == ["a"]

    @pytest.mark.asyncio
    async def test_empty_cancel_reason_still_cancels(self, hook_service, insert_context):
        HookRegistry.register("hookA", lambda ctx: HookResult(cancel=""))

        result = await hook_service.run_hooks(
            "onSaving", [HookDefinition(name="hookA")], insert_context
        )
        assert result is not None
        assert result.cancel == ""

    @pytest.mark.asyncio
    async def test_cancel_ignored_outside_cancellable_points(
        self, hook_service, insert_context, caplog
    ):
        order = []

        async def hook_a(ctx):
            order.append("a")
            return HookResult(cancel="too early")

        async def hook_b(ctx):
            order.append("b")

        HookRegistry.register("hookA", hook_a)
        HookRegistry.register("hookB", hook_b)

        result = await hook_service.run_hooks(
            "onValidating",
            [HookDefinition(name="hookA"), HookDefinition(name="hookB")],
            insert_context,
        )
        assert result is None
        assert order == ["a", "b"]
        assert "only onSaving hooks may cancel" in caplog.text

    @pytest.mark.asyncio
    async def test_hook_exception_propagates(self, hook_service, insert_context):
        async def exploding_hook(ctx):
            raise RuntimeError("Unexpected error")

        HookRegistry.register("explodingHook", exploding_hook)

        with pytest.raises(RuntimeError, match="Unexpected error"):
            await hook_service.run_hooks(
                "onSaved", [HookDefinition(name="explodingHook")], insert_context
            )

    @pytest.mark.asyncio
    async def test_unregistered_hook_skipped(self, hook_service, insert_context, caplog):
        result = await hook_service.run_hooks(
            "onSaving", [HookDefinition(name="doesNotExist")], insert_context
        )
        assert result is None
        assert "doesNotExist" in caplog.text

    @pytest.mark.asyncio
    async def test_unregistered_hook_raises_when_strict(self, insert_context):
        service = HookService(strict=True)
        with pytest.raises(HookNotRegisteredError):
            await service.run_hooks(
                "onSaving", [HookDefinition(name="doesNotExist")], insert_context
            )

    @pytest.mark.asyncio
    async def test_update_context_changes(self, hook_service, update_context):
        seen = {}

        async def capture_changes(ctx):
            seen.update(ctx.changes)

        HookRegistry.register("captureChanges", capture_changes)
        await hook_service.run_hooks(
            "onSaving", [HookDefinition(name="captureChanges")], update_context
        )
        assert seen == {"officialName": "Acme Group Ltd"}


class TestConstants:
    def test_valid_hook_points_in_execution_order(self):
        assert VALID_HOOK_POINTS == ("onValidating", "onSaving", "onSaved")

    def test_only_on_saving_cancels(self):
        assert CANCELLABLE_HOOK_POINTS == ("onSaving",)
