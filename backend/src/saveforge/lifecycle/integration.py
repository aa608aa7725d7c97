"""Integration between metadata loader types and lifecycle runtime types."""

from saveforge.core.types import SaveMode
from saveforge.hooks.types import HookDefinition
from saveforge.metadata.loader import EntityModel, HookConfig, ValidatorConfig
from saveforge.validation.types import ValidatorDefinition


def validator_config_to_definition(config: ValidatorConfig) -> ValidatorDefinition:
    """Convert metadata ValidatorConfig to ValidatorDefinition."""
    return ValidatorDefinition(
        type=config.type,
        params=config.params,
        message=config.message,
        code=config.code,
        on=[SaveMode(m) for m in config.on],
    )


def hook_config_to_definition(config: HookConfig) -> HookDefinition:
    """Convert metadata HookConfig to HookDefinition."""
    return HookDefinition(
        name=config.name,
        on=[SaveMode(m) for m in config.on],
        description=config.description,
    )


def get_hook_definitions(entity: EntityModel, hook_point: str) -> list[HookDefinition]:
    """Hook definitions for one hook point, base entity hooks first."""
    return [hook_config_to_definition(c) for c in entity.hooks.get(hook_point, [])]


def get_validator_definitions(entity: EntityModel) -> list[ValidatorDefinition]:
    return [validator_config_to_definition(c) for c in entity.validators]
